"""
Obstacles for one planning cycle.

An Obstacle pairs one perception snapshot with at most one predicted
trajectory. create_obstacles expands a prediction message into obstacles,
one per trajectory hypothesis.
"""

from __future__ import annotations

import zlib
from typing import Iterable, List, Optional, Union

from pyobstacles.classifier import is_static_obstacle
from pyobstacles.exceptions import NoTrajectoryError
from pyobstacles.geometry import BoundingBox2D
from pyobstacles.logging import LOG_DEBUG, timed
from pyobstacles.types import (
    ObstacleId,
    PerceptionSnapshot,
    PerceptionType,
    PredictedObject,
    PredictionMessage,
    RawId,
    Trajectory,
    TrajectoryPoint,
)

VIRTUAL_OBSTACLE_HEIGHT = 2.0


class Obstacle:
    """
    A perceived object, or one trajectory hypothesis of it.

    The footprint (length, width) is rigid; only the pose changes along the
    trajectory. Obstacles are read-only after creation and compare equal
    when their identifiers are equal.
    """

    def __init__(self, obstacle_id: Union[ObstacleId, RawId],
                 perception: PerceptionSnapshot,
                 trajectory: Optional[Trajectory] = None):
        if not isinstance(obstacle_id, ObstacleId):
            obstacle_id = ObstacleId(obstacle_id)
        self._id = obstacle_id
        self._perception = perception
        self._trajectory = trajectory if trajectory is not None else Trajectory()
        self._is_static = is_static_obstacle(perception)
        self._perception_box = BoundingBox2D(
            perception.x, perception.y, perception.heading,
            perception.length, perception.width,
        )

    @property
    def id(self) -> ObstacleId:
        return self._id

    @property
    def perception_id(self) -> RawId:
        return self._perception.id

    @property
    def perception(self) -> PerceptionSnapshot:
        return self._perception

    @property
    def trajectory(self) -> Trajectory:
        return self._trajectory

    @property
    def is_static(self) -> bool:
        return self._is_static

    @property
    def is_virtual(self) -> bool:
        """Virtual obstacles are planner-made and carry a negative perception id."""
        perception_id = self._perception.id
        return isinstance(perception_id, int) and perception_id < 0

    @property
    def speed(self) -> float:
        return self._perception.speed

    @property
    def has_trajectory(self) -> bool:
        return not self._trajectory.empty()

    def point_at_time(self, relative_time: float) -> TrajectoryPoint:
        """Where the obstacle is predicted to be at relative_time.

        Raises:
            NoTrajectoryError: If this obstacle has no trajectory points.
        """
        if self._trajectory.empty():
            raise NoTrajectoryError(str(self._id))
        return self._trajectory.point_at_time(relative_time)

    def perception_bounding_box(self) -> BoundingBox2D:
        return self._perception_box

    def bounding_box_at(self, point: TrajectoryPoint) -> BoundingBox2D:
        """Footprint of the obstacle placed at the pose of a trajectory point."""
        return BoundingBox2D(
            point.x, point.y, point.heading,
            self._perception.length, self._perception.width,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Obstacle):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        kind = "static" if self._is_static else "dynamic"
        return f"Obstacle(id={self._id}, {kind}, points={len(self._trajectory)})"


def _expand(predicted: PredictedObject) -> List[Obstacle]:
    """Turn one prediction record into obstacles, one per hypothesis."""
    raw_id = predicted.id
    trajectories = predicted.trajectories

    if len(trajectories) <= 1:
        trajectory = trajectories[0] if trajectories else None
        return [Obstacle(ObstacleId(raw_id), predicted.perception, trajectory)]

    return [
        Obstacle(ObstacleId(raw_id, k), predicted.perception, trajectory)
        for k, trajectory in enumerate(trajectories)
    ]


@timed
def create_obstacles(
    message: Union[PredictionMessage, Iterable[PredictedObject]],
) -> List[Obstacle]:
    """Create the obstacles of one planning cycle from a prediction message.

    An object with no trajectory or a single trajectory yields one obstacle
    keyed by its raw id. An object with N > 1 trajectories yields N
    obstacles keyed (raw id, k) for k = 0..N-1 in input order, all sharing
    the object's perception snapshot.

    Args:
        message: Decoded prediction message or any iterable of records.

    Returns:
        Obstacles in message order.
    """
    obstacles: List[Obstacle] = []
    num_objects = 0
    for predicted in message:
        obstacles.extend(_expand(predicted))
        num_objects += 1

    LOG_DEBUG(f"Created {len(obstacles)} obstacles from {num_objects} predicted objects")
    return obstacles


def _virtual_perception_id(name: str) -> int:
    """Deterministic negative 32-bit id derived from the obstacle name."""
    unsigned = zlib.crc32(name.encode("utf-8")) | 0x80000000
    return unsigned - (1 << 32)


def create_static_virtual_obstacle(name: str, box: BoundingBox2D) -> Obstacle:
    """Create a planner-made static obstacle (e.g. a stop wall) from a box.

    The obstacle has no trajectory, type UNKNOWN_UNMOVABLE and a negative
    perception id, so it reports is_virtual and is_static.
    """
    perception = PerceptionSnapshot(
        id=_virtual_perception_id(name),
        type=PerceptionType.UNKNOWN_UNMOVABLE,
        x=box.center_x,
        y=box.center_y,
        heading=box.heading,
        length=box.length,
        width=box.width,
        height=VIRTUAL_OBSTACLE_HEIGHT,
    )
    LOG_DEBUG(f"Created virtual obstacle '{name}' with perception id {perception.id}")
    return Obstacle(ObstacleId(name), perception)
