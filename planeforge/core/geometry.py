"""Value types for planar geometry.

Points are numpy arrays of shape ``(3,)``. Two-coordinate input is padded with
``z = 0`` so that every operation can work in 3D and reason about the plane
the geometry lies in.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Sequence

import numpy as np

from .tolerance import DISTANCE_TOLERANCE


def as_point(value) -> np.ndarray:
    """Return a fresh ``(3,)`` float array for ``value``.

    Args:
        value: Sequence of 2 or 3 coordinates

    Returns:
        Copy of the point as a 3D numpy array

    Raises:
        ValueError: If ``value`` does not hold 2 or 3 coordinates
    """
    arr = np.array(value, dtype=float).reshape(-1)
    if arr.size == 2:
        return np.array([arr[0], arr[1], 0.0])
    if arr.size != 3:
        raise ValueError(f"Expected a point with 2 or 3 coordinates, got {arr.size}")
    return arr


def as_points(values) -> np.ndarray:
    """Return a fresh ``(N, 3)`` float array for a sequence of points."""
    arr = np.array(values, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 3))
    if arr.ndim != 2:
        raise ValueError(f"Expected an (N, 2) or (N, 3) array of points, got shape {arr.shape}")
    if arr.shape[1] == 2:
        arr = np.column_stack([arr, np.zeros(len(arr))])
    elif arr.shape[1] != 3:
        raise ValueError(f"Expected points with 2 or 3 coordinates, got {arr.shape[1]}")
    return arr


@dataclass(eq=False)
class Line:
    """Straight segment from ``start`` to ``end``.

    Attributes:
        start: Start point
        end: End point

    Examples:
        >>> line = Line((0, 0), (3, 4))
        >>> line.length
        5.0
    """
    start: np.ndarray
    end: np.ndarray

    def __post_init__(self):
        self.start = as_point(self.start)
        self.end = as_point(self.end)

    @property
    def vector(self) -> np.ndarray:
        return self.end - self.start

    @property
    def length(self) -> float:
        return float(np.linalg.norm(self.end - self.start))

    @property
    def square_length(self) -> float:
        diff = self.end - self.start
        return float(np.dot(diff, diff))

    @property
    def direction(self) -> np.ndarray:
        """Unit direction from start to end (zero vector when degenerate)."""
        diff = self.end - self.start
        norm = np.linalg.norm(diff)
        if norm == 0:
            return np.zeros(3)
        return diff / norm

    @property
    def midpoint(self) -> np.ndarray:
        return (self.start + self.end) / 2.0

    def control_points(self) -> List[np.ndarray]:
        return [self.start.copy(), self.end.copy()]

    def point_at(self, parameter: float) -> np.ndarray:
        """Point at normalised ``parameter`` (0 at start, 1 at end)."""
        return self.start + (self.end - self.start) * parameter

    def is_degenerate(self, tolerance: float = DISTANCE_TOLERANCE) -> bool:
        return self.square_length <= tolerance * tolerance

    def flip(self) -> 'Line':
        return Line(self.end, self.start)

    def copy(self) -> 'Line':
        return Line(self.start, self.end)

    def __repr__(self) -> str:
        return f"Line({self.start.tolist()}, {self.end.tolist()})"


@dataclass(eq=False)
class Polyline:
    """Ordered sequence of control points.

    A polyline is closed (a region) when it has more than two points and its
    first and last points coincide within tolerance.

    Attributes:
        points: ``(N, 3)`` array of control points

    Examples:
        >>> square = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> square.is_closed()
        True
        >>> square.length
        4.0
    """
    points: np.ndarray

    def __post_init__(self):
        self.points = as_points(self.points)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def start_point(self) -> np.ndarray:
        return self.points[0].copy()

    @property
    def end_point(self) -> np.ndarray:
        return self.points[-1].copy()

    @property
    def length(self) -> float:
        if len(self.points) < 2:
            return 0.0
        return float(np.linalg.norm(np.diff(self.points, axis=0), axis=1).sum())

    def control_points(self) -> List[np.ndarray]:
        return [p.copy() for p in self.points]

    def is_closed(self, tolerance: float = DISTANCE_TOLERANCE) -> bool:
        if len(self.points) < 3:
            return False
        diff = self.points[0] - self.points[-1]
        return float(np.dot(diff, diff)) <= tolerance * tolerance

    def segments(self) -> List[Line]:
        """Consecutive segments, including the closing one of a region."""
        return [Line(self.points[i], self.points[i + 1]) for i in range(len(self.points) - 1)]

    def segment_midpoints(self) -> np.ndarray:
        if len(self.points) < 2:
            return np.zeros((0, 3))
        return (self.points[:-1] + self.points[1:]) / 2.0

    def vertices(self, tolerance: float = DISTANCE_TOLERANCE) -> np.ndarray:
        """Control points without the duplicated closing point."""
        if self.is_closed(tolerance):
            return self.points[:-1].copy()
        return self.points.copy()

    def flip(self) -> 'Polyline':
        return Polyline(self.points[::-1])

    def copy(self) -> 'Polyline':
        return Polyline(self.points)

    def __repr__(self) -> str:
        return f"Polyline({len(self.points)} points)"


class Plane(NamedTuple):
    """Plane through ``origin`` with unit ``normal``."""
    origin: np.ndarray
    normal: np.ndarray

    def distance_to(self, points) -> np.ndarray:
        """Absolute distances from ``points`` (``(N, 3)``) to the plane."""
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        return np.abs((pts - self.origin) @ self.normal)

    def project(self, points) -> np.ndarray:
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        offsets = (pts - self.origin) @ self.normal
        return pts - np.outer(offsets, self.normal)


class PlaneFrame(NamedTuple):
    """Orthonormal 2D frame lying in a plane.

    ``to_local`` drops the out-of-plane component, so callers that care about
    it must check the distance to the plane first.
    """
    origin: np.ndarray
    x_axis: np.ndarray
    y_axis: np.ndarray
    normal: np.ndarray

    @classmethod
    def from_plane(cls, plane: Plane) -> 'PlaneFrame':
        normal = plane.normal / np.linalg.norm(plane.normal)
        # Seed with the world axis least aligned with the normal
        seed = np.zeros(3)
        seed[int(np.argmin(np.abs(normal)))] = 1.0
        x_axis = np.cross(normal, seed)
        x_axis /= np.linalg.norm(x_axis)
        y_axis = np.cross(normal, x_axis)
        return cls(np.asarray(plane.origin, dtype=float), x_axis, y_axis, normal)

    @classmethod
    def from_axes(cls, origin, x_direction, y_hint) -> 'PlaneFrame':
        """Frame with x along ``x_direction`` and y in the plane spanned with ``y_hint``."""
        x_axis = np.asarray(x_direction, dtype=float)
        x_axis = x_axis / np.linalg.norm(x_axis)
        normal = np.cross(x_axis, np.asarray(y_hint, dtype=float))
        normal /= np.linalg.norm(normal)
        y_axis = np.cross(normal, x_axis)
        return cls(np.asarray(origin, dtype=float), x_axis, y_axis, normal)

    def to_local(self, points) -> np.ndarray:
        pts = np.atleast_2d(np.asarray(points, dtype=float)) - self.origin
        return np.column_stack([pts @ self.x_axis, pts @ self.y_axis])

    def from_local(self, coords) -> np.ndarray:
        uv = np.atleast_2d(np.asarray(coords, dtype=float))
        return self.origin + np.outer(uv[:, 0], self.x_axis) + np.outer(uv[:, 1], self.y_axis)


def polylines_from(curves: Sequence) -> List[Polyline]:
    """Wrap every item of ``curves`` as a :class:`Polyline` (copies existing ones)."""
    return [c.copy() if isinstance(c, Polyline) else Polyline(c) for c in curves]


__all__ = [
    'as_point',
    'as_points',
    'Line',
    'Polyline',
    'Plane',
    'PlaneFrame',
    'polylines_from',
]
