"""Common geometry manipulation utilities.

Splitting curves at points, stitching pieces back together, and converting
between planeforge value types and shapely geometries.
"""

from typing import List, Sequence, Union

import numpy as np
from shapely.geometry import LinearRing, LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry

from .geometry import Line, Polyline, as_point, as_points
from .primitives import point_segment_square_distance, square_distance
from .tolerance import DISTANCE_TOLERANCE


def _sort_along(points: List[np.ndarray], start: np.ndarray, end: np.ndarray) -> List[np.ndarray]:
    direction = end - start
    return sorted(points, key=lambda p: float(np.dot(p - start, direction)))


def _unique_points(points: List[np.ndarray], tolerance: float) -> List[np.ndarray]:
    sq_tol = tolerance * tolerance
    unique: List[np.ndarray] = []
    for p in points:
        if all(square_distance(p, q) > sq_tol for q in unique):
            unique.append(p)
    return unique


def split_line_at_points(
    line: Line,
    points: Sequence,
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Line]:
    """Split ``line`` at the points lying on its interior.

    Points within ``tolerance`` of either endpoint or off the segment are
    ignored.

    Examples:
        >>> split_line_at_points(Line((0, 0), (2, 0)), [(1, 0)])
        [Line([0.0, 0.0, 0.0], [1.0, 0.0, 0.0]), Line([1.0, 0.0, 0.0], [2.0, 0.0, 0.0])]
    """
    sq_tol = tolerance * tolerance
    cuts = []
    for p in points:
        p = as_point(p)
        if square_distance(p, line.start) <= sq_tol or square_distance(p, line.end) <= sq_tol:
            continue
        if point_segment_square_distance(p, line.start, line.end) <= sq_tol:
            cuts.append(p)

    if not cuts:
        return [line.copy()]

    cuts = _sort_along(_unique_points(cuts, tolerance), line.start, line.end)
    nodes = [line.start] + cuts + [line.end]
    return [Line(nodes[i], nodes[i + 1]) for i in range(len(nodes) - 1)]


def split_polyline_at_points(
    curve: Polyline,
    points: Sequence,
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Polyline]:
    """Split ``curve`` into sections at the points lying on it.

    For a closed curve the section running through the seam is merged back
    together, unless a split point coincides with the seam itself.

    Args:
        curve: Curve to split
        points: Split points
        tolerance: Distance tolerance

    Returns:
        List of sections in curve order

    Examples:
        >>> square = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> [len(p) for p in split_polyline_at_points(square, [(1, 0.5), (0, 0.5)])]
        [4, 4]
    """
    pts = [as_point(p) for p in points]
    if not pts or len(curve) < 2:
        return [curve.copy()]

    sq_tol = tolerance * tolerance
    closed = curve.is_closed(tolerance)
    control = curve.points

    sections: List[List[np.ndarray]] = []
    section: List[np.ndarray] = []
    for i in range(len(control) - 1):
        start, end = control[i], control[i + 1]
        splits_at_start = False
        interior = []
        for p in pts:
            if square_distance(p, start) <= sq_tol:
                splits_at_start = True
                if i == 0:
                    closed = False
            elif square_distance(p, end) > sq_tol and point_segment_square_distance(p, start, end) <= sq_tol:
                interior.append(p)

        section.append(start.copy())
        if splits_at_start and len(section) > 1:
            sections.append(section)
            section = [start.copy()]

        for p in _sort_along(_unique_points(interior, tolerance), start, end):
            section.append(p.copy())
            sections.append(section)
            section = [p.copy()]

    section.append(control[-1].copy())
    sections.append(section)

    if closed and len(sections) > 1:
        # The last section runs into the seam; continue it with the first one
        sections[0] = sections[-1] + sections[0][1:]
        sections.pop()

    return [Polyline(s) for s in sections]


def split_at_points(
    curve: Union[Line, Polyline],
    points: Sequence,
    tolerance: float = DISTANCE_TOLERANCE
) -> Union[List[Line], List[Polyline]]:
    """Split a line or polyline at ``points`` (see the typed variants)."""
    if isinstance(curve, Line):
        return split_line_at_points(curve, points, tolerance)
    return split_polyline_at_points(curve, points, tolerance)


def join(
    curves: Sequence[Union[Line, Polyline]],
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Polyline]:
    """Stitch curves that share endpoints into continuous polylines.

    Pieces are reversed as needed. A piece that is already closed is never
    extended.

    Args:
        curves: Lines or polylines to join
        tolerance: Distance within which two endpoints are considered shared

    Returns:
        Joined polylines; closed loops have identical first and last points

    Examples:
        >>> sides = [Line((0, 0), (1, 0)), Line((0, 1), (1, 1)),
        ...          Line((1, 1), (1, 0)), Line((0, 0), (0, 1))]
        >>> loops = join(sides)
        >>> len(loops), loops[0].is_closed()
        (1, True)
    """
    sq_tol = tolerance * tolerance
    sections: List[List[np.ndarray]] = []
    for curve in curves:
        pts = curve.control_points()
        if len(pts) > 1:
            sections.append(pts)

    def is_loop(section: List[np.ndarray]) -> bool:
        return len(section) > 2 and square_distance(section[0], section[-1]) <= sq_tol

    counter = 0
    while counter < len(sections):
        current = sections[counter]
        merged = False
        if not is_loop(current):
            for j in range(counter + 1, len(sections)):
                other = sections[j]
                if is_loop(other):
                    continue
                if square_distance(other[0], current[0]) <= sq_tol:
                    sections[j] = current[:0:-1] + other
                elif square_distance(other[0], current[-1]) <= sq_tol:
                    sections[j] = current + other[1:]
                elif square_distance(other[-1], current[0]) <= sq_tol:
                    sections[j] = other + current[1:]
                elif square_distance(other[-1], current[-1]) <= sq_tol:
                    sections[j] = other + current[-2::-1]
                else:
                    continue
                del sections[counter]
                merged = True
                break
        if not merged:
            counter += 1

    result = []
    for section in sections:
        if is_loop(section):
            section[-1] = section[0].copy()
        result.append(Polyline(section))
    return result


# ============================================================================
# Shapely interop
# ============================================================================

def to_shapely(curve: Union[Line, Polyline]) -> BaseGeometry:
    """Convert to a shapely geometry (``Polygon`` for regions, ``LineString`` otherwise).

    Coordinates keep their z value; shapely measures in the XY projection.
    """
    if isinstance(curve, Line):
        return LineString([curve.start, curve.end])
    if curve.is_closed():
        return Polygon(curve.points)
    return LineString(curve.points)


def from_shapely(geometry: BaseGeometry) -> List[Polyline]:
    """Convert a shapely geometry into polylines.

    Polygons contribute their exterior followed by their interiors.
    """
    if isinstance(geometry, Polygon):
        if geometry.is_empty:
            return []
        rings = [geometry.exterior] + list(geometry.interiors)
        return [Polyline(np.array(ring.coords)) for ring in rings]
    if isinstance(geometry, (LineString, LinearRing)):
        return [] if geometry.is_empty else [Polyline(np.array(geometry.coords))]
    if hasattr(geometry, 'geoms'):
        result = []
        for part in geometry.geoms:
            result.extend(from_shapely(part))
        return result
    raise TypeError(f"Cannot convert {geometry.geom_type} to polylines")


def as_polyline(value) -> Polyline:
    """Coerce a polyline, line, shapely curve/polygon or point sequence into a Polyline."""
    if isinstance(value, Polyline):
        return value
    if isinstance(value, Line):
        return Polyline([value.start, value.end])
    if isinstance(value, Polygon):
        return Polyline(np.array(value.exterior.coords))
    if isinstance(value, MultiLineString):
        raise TypeError("MultiLineString holds several curves; use from_shapely instead")
    if isinstance(value, BaseGeometry):
        return Polyline(np.array(value.coords))
    return Polyline(as_points(value))


def as_line(value) -> Line:
    """Coerce a line, two-point LineString or pair of points into a Line."""
    if isinstance(value, Line):
        return value
    if isinstance(value, LineString):
        coords = np.array(value.coords)
    else:
        coords = as_points(value)
    if len(coords) != 2:
        raise ValueError(f"A line needs exactly 2 points, got {len(coords)}")
    return Line(coords[0], coords[1])


__all__ = [
    'split_line_at_points',
    'split_polyline_at_points',
    'split_at_points',
    'join',
    'to_shapely',
    'from_shapely',
    'as_polyline',
    'as_line',
]
