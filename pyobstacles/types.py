"""
Core data types for one planning cycle.

- PerceptionType: closed taxonomy of perceived object kinds
- PerceptionSnapshot: observed state of an object at detection time
- TrajectoryPoint / Trajectory: time-stamped predicted poses
- ObstacleId: structured obstacle identifier (base id + hypothesis index)
- PredictedObject / PredictionMessage: decoded prediction input
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple, Union

import numpy as np

from pyobstacles.exceptions import (
    InvalidObstacleError,
    InvalidTrajectoryError,
    NoTrajectoryError,
)
from pyobstacles.geometry import lerp, slerp

RawId = Union[int, str]


class PerceptionType(Enum):
    UNKNOWN = 0
    UNKNOWN_MOVABLE = 1
    UNKNOWN_UNMOVABLE = 2
    PEDESTRIAN = 3
    BICYCLE = 4
    VEHICLE = 5

    @classmethod
    def parse(cls, value: Union["PerceptionType", str, int]) -> "PerceptionType":
        """Resolve a member from itself, its name or its integer value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown perception type name: {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"Cannot interpret {value!r} as a perception type")


@dataclass(frozen=True)
class PerceptionSnapshot:
    """Observed state of one perceived object.

    Type accepts a PerceptionType, its name or its integer value and is
    stored as the enum member. None means unset.
    """

    id: RawId
    type: Optional[PerceptionType]
    x: float
    y: float
    heading: float
    length: float
    width: float
    height: float = 0.0
    velocity_x: float = 0.0
    velocity_y: float = 0.0

    def __post_init__(self):
        if self.type is not None:
            try:
                object.__setattr__(self, "type", PerceptionType.parse(self.type))
            except ValueError as e:
                raise InvalidObstacleError(self.id, str(e)) from None
        if self.length < 0.0:
            raise InvalidObstacleError(self.id, f"negative length {self.length}")
        if self.width < 0.0:
            raise InvalidObstacleError(self.id, f"negative width {self.width}")

    @property
    def speed(self) -> float:
        return math.hypot(self.velocity_x, self.velocity_y)


@dataclass(frozen=True)
class TrajectoryPoint:
    relative_time: float
    x: float
    y: float
    heading: float
    v: float = 0.0
    a: float = 0.0
    kappa: float = 0.0
    dkappa: float = 0.0
    s: float = 0.0


def interpolate_trajectory_point(p0: TrajectoryPoint, p1: TrajectoryPoint,
                                 t: float) -> TrajectoryPoint:
    """Linearly interpolate every field of two points at time t.

    The heading follows the shortest arc between the two headings.
    """
    t0 = p0.relative_time
    t1 = p1.relative_time
    return TrajectoryPoint(
        relative_time=t,
        x=lerp(p0.x, t0, p1.x, t1, t),
        y=lerp(p0.y, t0, p1.y, t1, t),
        heading=slerp(p0.heading, t0, p1.heading, t1, t),
        v=lerp(p0.v, t0, p1.v, t1, t),
        a=lerp(p0.a, t0, p1.a, t1, t),
        kappa=lerp(p0.kappa, t0, p1.kappa, t1, t),
        dkappa=lerp(p0.dkappa, t0, p1.dkappa, t1, t),
        s=lerp(p0.s, t0, p1.s, t1, t),
    )


class Trajectory:
    """
    Immutable sequence of trajectory points with strictly increasing
    relative time. An empty trajectory is valid and is what static or
    untracked objects carry.
    """

    def __init__(self, points: Iterable[TrajectoryPoint] = (),
                 probability: Optional[float] = None):
        self._points: Tuple[TrajectoryPoint, ...] = tuple(points)
        self._times = np.array([p.relative_time for p in self._points], dtype=float)

        if len(self._times) > 1:
            increasing = np.diff(self._times) > 0.0
            if not np.all(increasing):
                index = int(np.argmin(increasing)) + 1
                raise InvalidTrajectoryError(
                    "relative_time must be strictly increasing", index=index
                )

        if probability is not None and not 0.0 <= probability <= 1.0:
            raise InvalidTrajectoryError(f"probability {probability} outside [0, 1]")
        self._probability = probability

    @property
    def points(self) -> Tuple[TrajectoryPoint, ...]:
        return self._points

    @property
    def probability(self) -> Optional[float]:
        return self._probability

    @property
    def times(self) -> np.ndarray:
        return self._times.copy()

    @property
    def start_time(self) -> float:
        if not self._points:
            raise NoTrajectoryError()
        return self._points[0].relative_time

    @property
    def end_time(self) -> float:
        if not self._points:
            raise NoTrajectoryError()
        return self._points[-1].relative_time

    def empty(self) -> bool:
        return len(self._points) == 0

    def point_at_time(self, relative_time: float) -> TrajectoryPoint:
        """Return the predicted point at relative_time.

        Times before the first point or after the last point clamp to that
        point unchanged; there is no extrapolation. Interior times are
        interpolated between the bracketing pair p_i.t <= t < p_{i+1}.t,
        found by binary search.

        Interpolated headings are normalized to [-pi, pi). Clamped points
        are returned as stored, so a boundary heading of pi stays pi while
        an interior point queried at its own time reads back as -pi.

        Raises:
            NoTrajectoryError: If the trajectory has no points.
        """
        if not self._points:
            raise NoTrajectoryError()

        first = self._points[0]
        last = self._points[-1]
        if relative_time <= first.relative_time:
            return first
        if relative_time >= last.relative_time:
            return last

        index = int(np.searchsorted(self._times, relative_time, side="right")) - 1
        return interpolate_trajectory_point(
            self._points[index], self._points[index + 1], relative_time
        )

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> TrajectoryPoint:
        return self._points[index]

    def __iter__(self) -> Iterator[TrajectoryPoint]:
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trajectory):
            return NotImplemented
        return self._points == other._points and self._probability == other._probability

    def __repr__(self) -> str:
        if not self._points:
            return "Trajectory(empty)"
        return (
            f"Trajectory({len(self._points)} points, "
            f"t=[{self.start_time:.3f}, {self.end_time:.3f}])"
        )


@dataclass(frozen=True)
class ObstacleId:
    """
    Obstacle identifier: the perceived object's raw id plus, when the
    object has several trajectory hypotheses, the hypothesis index.

    Keys compare structurally, so ObstacleId("7_1") and ObstacleId(7, 1)
    are different obstacles even though both render as "7_1".
    """

    base: RawId
    variant: Optional[int] = None

    @property
    def label(self) -> str:
        if self.variant is None:
            return str(self.base)
        return f"{self.base}_{self.variant}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class PredictedObject:
    """One prediction record: a snapshot and its trajectory hypotheses."""

    perception: PerceptionSnapshot
    trajectories: Tuple[Trajectory, ...] = ()
    predicted_period: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "trajectories", tuple(self.trajectories))

    @property
    def id(self) -> RawId:
        return self.perception.id


@dataclass(frozen=True)
class PredictionMessage:
    objects: Tuple[PredictedObject, ...] = field(default_factory=tuple)
    timestamp: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "objects", tuple(self.objects))

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[PredictedObject]:
        return iter(self.objects)
