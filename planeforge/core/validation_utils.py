"""Common validation utilities.

Checks shared by the Boolean, offset and split operations. The ``require_*``
helpers raise :class:`ValidationError`; the others are plain predicates.
"""

from typing import Sequence

import numpy as np

from .errors import ValidationError
from .geometry import Line, Polyline
from .primitives import is_coplanar, segment_intersections, square_distance
from .spatial_utils import find_line_pairs
from .tolerance import DISTANCE_TOLERANCE


def is_ring_closed(
    coords: np.ndarray,
    tolerance: float = DISTANCE_TOLERANCE
) -> bool:
    """Check if coordinate ring is closed (first == last).

    Args:
        coords: Coordinate array (Nx3)
        tolerance: Tolerance for coordinate comparison

    Returns:
        True if ring is closed (first point equals last point within tolerance)

    Examples:
        >>> is_ring_closed(np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 0, 0]]))
        True
    """
    if len(coords) < 3:
        return False

    return square_distance(coords[0], coords[-1]) <= tolerance * tolerance


def ensure_ring_closed(curve: Polyline, tolerance: float = DISTANCE_TOLERANCE) -> Polyline:
    """Return ``curve`` closed by appending its first point if needed.

    Curves with fewer than three points are returned unchanged.
    """
    if len(curve) < 3 or is_ring_closed(curve.points, tolerance):
        return curve

    return Polyline(np.vstack([curve.points, curve.points[0:1]]))


def has_duplicate_vertices(
    coords: np.ndarray,
    tolerance: float = DISTANCE_TOLERANCE
) -> bool:
    """Check if coordinate array has consecutive duplicate vertices.

    Examples:
        >>> has_duplicate_vertices(np.array([[0, 0, 0], [0, 0, 0], [1, 1, 0]]))
        True
    """
    if len(coords) < 2:
        return False

    steps = np.linalg.norm(np.diff(coords, axis=0), axis=1)
    return bool((steps <= tolerance).any())


def is_planar(curve: Polyline, tolerance: float = DISTANCE_TOLERANCE) -> bool:
    return is_coplanar(curve.points, tolerance)


def _distinct_count(points, tolerance: float) -> int:
    sq_tol = tolerance * tolerance
    distinct = []
    for p in points:
        if all(square_distance(p, q) > sq_tol for q in distinct):
            distinct.append(p)
    return len(distinct)


def is_self_intersecting(curve: Polyline, tolerance: float = DISTANCE_TOLERANCE) -> bool:
    """Check whether non-adjacent segments of ``curve`` touch or cross."""
    segments = curve.segments()
    count = len(segments)
    closed = curve.is_closed(tolerance)

    for i, j in find_line_pairs(segments, margin=tolerance):
        adjacent = j == i + 1 or (closed and i == 0 and j == count - 1)
        points = segment_intersections(segments[i], segments[j], tolerance)
        if not adjacent and points:
            return True
        if adjacent and _distinct_count(points, tolerance) > 1:
            # Neighbours folding back over each other
            return True

    return False


def require_regions(regions: Sequence[Polyline], tolerance: float = DISTANCE_TOLERANCE) -> None:
    """Raise :class:`ValidationError` unless every curve is a closed polyline."""
    for region in regions:
        if not isinstance(region, Polyline):
            raise ValidationError(f"Expected a closed Polyline, got {type(region).__name__}", region)
        if not region.is_closed(tolerance):
            raise ValidationError("Region operations require closed polylines", region)


def require_lines(lines: Sequence[Line]) -> None:
    for line in lines:
        if not isinstance(line, Line):
            raise ValidationError(f"Expected a Line, got {type(line).__name__}", line)


def validate_split_region(region: Polyline, tolerance: float = DISTANCE_TOLERANCE) -> None:
    """Raise :class:`ValidationError` unless ``region`` is closed, planar and simple."""
    require_regions([region], tolerance)
    if not is_planar(region, tolerance):
        raise ValidationError("Region must be planar", region)
    if is_self_intersecting(region, tolerance):
        raise ValidationError("Region must not be self-intersecting", region)


__all__ = [
    'is_ring_closed',
    'ensure_ring_closed',
    'has_duplicate_vertices',
    'is_planar',
    'is_self_intersecting',
    'require_regions',
    'require_lines',
    'validate_split_region',
]
