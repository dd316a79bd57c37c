"""
Planar geometry for obstacle footprints.

Provides angle helpers used by trajectory interpolation and the
BoundingBox2D oriented rectangle.
"""

from __future__ import annotations

import math

import numpy as np

from pyobstacles.exceptions import InvalidGeometryError

MATH_EPSILON = 1e-10


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi)."""
    a = math.fmod(angle + math.pi, 2.0 * math.pi)
    if a < 0.0:
        a += 2.0 * math.pi
    return a - math.pi


def lerp(x0: float, t0: float, x1: float, t1: float, t: float) -> float:
    """Linear interpolation of a scalar sampled at t0 and t1."""
    if abs(t1 - t0) <= MATH_EPSILON:
        return x0
    r = (t - t0) / (t1 - t0)
    return x0 + r * (x1 - x0)


def slerp(a0: float, t0: float, a1: float, t1: float, t: float) -> float:
    """Interpolate between two headings along the shortest arc.

    Both headings are normalized first, so a0=3.1 and a1=-3.1 interpolate
    through pi instead of through zero. The result is normalized.
    """
    if abs(t1 - t0) <= MATH_EPSILON:
        return normalize_angle(a0)

    a0_n = normalize_angle(a0)
    a1_n = normalize_angle(a1)
    d = a1_n - a0_n
    if d > math.pi:
        d -= 2.0 * math.pi
    elif d < -math.pi:
        d += 2.0 * math.pi

    r = (t - t0) / (t1 - t0)
    return normalize_angle(a0_n + d * r)


class BoundingBox2D:
    """
    Oriented rectangle given by its center, heading, length and width.

    Length runs along the heading direction and width across it. Corners
    are returned counter-clockwise starting at the front-right corner:
    front-right, front-left, rear-left, rear-right.
    """

    def __init__(self, center_x: float, center_y: float, heading: float,
                 length: float, width: float):
        if length < -MATH_EPSILON:
            raise InvalidGeometryError("length", length)
        if width < -MATH_EPSILON:
            raise InvalidGeometryError("width", width)

        self._center = np.array([float(center_x), float(center_y)])
        self._heading = float(heading)
        self._length = float(length)
        self._width = float(width)
        self._half_length = self._length / 2.0
        self._half_width = self._width / 2.0
        self._cos_heading = math.cos(self._heading)
        self._sin_heading = math.sin(self._heading)

    @property
    def center(self) -> np.ndarray:
        return self._center.copy()

    @property
    def center_x(self) -> float:
        return float(self._center[0])

    @property
    def center_y(self) -> float:
        return float(self._center[1])

    @property
    def heading(self) -> float:
        return self._heading

    @property
    def length(self) -> float:
        return self._length

    @property
    def width(self) -> float:
        return self._width

    @property
    def half_length(self) -> float:
        return self._half_length

    @property
    def half_width(self) -> float:
        return self._half_width

    @property
    def area(self) -> float:
        return self._length * self._width

    @property
    def diagonal(self) -> float:
        return math.hypot(self._length, self._width)

    def get_all_corners(self) -> np.ndarray:
        """Return the four corners as a (4, 2) array.

        The half-extents (+-length/2, +-width/2) are rotated by the heading
        and translated to the center.
        """
        dx1 = self._cos_heading * self._half_length
        dy1 = self._sin_heading * self._half_length
        dx2 = self._sin_heading * self._half_width
        dy2 = -self._cos_heading * self._half_width

        offsets = np.array([
            [dx1 + dx2, dy1 + dy2],
            [dx1 - dx2, dy1 - dy2],
            [-dx1 - dx2, -dy1 - dy2],
            [-dx1 + dx2, -dy1 + dy2],
        ])
        return self._center + offsets

    def is_point_in(self, x: float, y: float) -> bool:
        """Check whether a point lies inside the box (boundary included)."""
        x0 = x - self._center[0]
        y0 = y - self._center[1]
        dx = abs(x0 * self._cos_heading + y0 * self._sin_heading)
        dy = abs(-x0 * self._sin_heading + y0 * self._cos_heading)
        return (dx <= self._half_length + MATH_EPSILON
                and dy <= self._half_width + MATH_EPSILON)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox2D):
            return NotImplemented
        return (
            self.center_x == other.center_x
            and self.center_y == other.center_y
            and self._heading == other._heading
            and self._length == other._length
            and self._width == other._width
        )

    def __repr__(self) -> str:
        return (
            f"BoundingBox2D(center=({self.center_x:.3f}, {self.center_y:.3f}), "
            f"heading={self._heading:.3f}, length={self._length:.3f}, "
            f"width={self._width:.3f})"
        )
