"""
Identifier-keyed registry of the obstacles in the current planning cycle.

The registry owns its obstacles for the cycle; a new cycle builds a new
registry. Lookups accept either a structured ObstacleId or its string
label.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Set, Union, ValuesView

from pyobstacles.config import DUPLICATE_POLICIES, ObstacleConfig
from pyobstacles.exceptions import (
    AmbiguousObstacleIdError,
    ConfigValidationError,
    DuplicateObstacleError,
)
from pyobstacles.logging import LOG_DEBUG, LOG_WARN
from pyobstacles.obstacle import Obstacle
from pyobstacles.types import ObstacleId

ObstacleKey = Union[ObstacleId, str]


class IndexedObstacles:
    """Obstacles of one cycle, indexed by identifier."""

    def __init__(self, duplicate_policy: str = "reject"):
        """
        Args:
            duplicate_policy: "reject" raises on a repeated identifier,
                "overwrite" replaces the registered obstacle.
        """
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigValidationError(
                "registry.duplicate_policy",
                f"must be one of {DUPLICATE_POLICIES}",
                duplicate_policy,
            )
        self._duplicate_policy = duplicate_policy
        self._obstacles: Dict[ObstacleId, Obstacle] = {}
        self._ids_by_label: Dict[str, Set[ObstacleId]] = {}

    @classmethod
    def from_obstacles(cls, obstacles: Iterable[Obstacle],
                       duplicate_policy: str = "reject") -> "IndexedObstacles":
        """Build a registry holding each obstacle under its own id."""
        registry = cls(duplicate_policy)
        for obstacle in obstacles:
            registry.add(obstacle.id, obstacle)
        LOG_DEBUG(f"Indexed {len(registry)} obstacles")
        return registry

    @classmethod
    def from_config(cls, config: ObstacleConfig) -> "IndexedObstacles":
        return cls(config.registry.duplicate_policy)

    @property
    def duplicate_policy(self) -> str:
        return self._duplicate_policy

    def add(self, obstacle_id: Union[ObstacleId, int, str], obstacle: Obstacle) -> None:
        """Register an obstacle under obstacle_id.

        Raises:
            DuplicateObstacleError: If the id is taken and the policy is "reject".
        """
        if not isinstance(obstacle_id, ObstacleId):
            obstacle_id = ObstacleId(obstacle_id)

        if obstacle_id in self._obstacles:
            if self._duplicate_policy == "reject":
                raise DuplicateObstacleError(str(obstacle_id))
            LOG_WARN(f"Overwriting registered obstacle '{obstacle_id}'")

        self._obstacles[obstacle_id] = obstacle
        self._ids_by_label.setdefault(obstacle_id.label, set()).add(obstacle_id)

    def find(self, key: ObstacleKey) -> Optional[Obstacle]:
        """Look up an obstacle by ObstacleId or string label.

        Returns:
            The registered obstacle, or None if nothing matches.

        Raises:
            AmbiguousObstacleIdError: If a string label matches several ids.
        """
        if isinstance(key, ObstacleId):
            return self._obstacles.get(key)

        candidates = self._ids_by_label.get(str(key))
        if not candidates:
            return None
        if len(candidates) > 1:
            raise AmbiguousObstacleIdError(
                str(key), sorted(repr(c) for c in candidates)
            )
        (obstacle_id,) = candidates
        return self._obstacles[obstacle_id]

    def items(self) -> ValuesView[Obstacle]:
        """Read-only view over the registered obstacles, in insertion order."""
        return self._obstacles.values()

    def ids(self) -> List[ObstacleId]:
        return list(self._obstacles)

    def __len__(self) -> int:
        return len(self._obstacles)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, ObstacleId):
            return key in self._obstacles
        return bool(self._ids_by_label.get(str(key)))

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self._obstacles.values())

    def __repr__(self) -> str:
        return f"IndexedObstacles({len(self._obstacles)} obstacles)"
