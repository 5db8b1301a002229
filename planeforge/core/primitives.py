"""Primitive geometric queries on 3D points lying in a common plane.

Vector algebra is done with numpy; point-in-polygon and boundary distance are
delegated to shapely after mapping the region into a local 2D frame of its
fitted plane.
"""

from typing import List, Optional, Sequence

import numpy as np
from shapely.geometry import LinearRing, Point, Polygon
from shapely.prepared import prep

from .geometry import Line, Plane, PlaneFrame, Polyline, as_point, as_points
from .spatial_utils import find_cross_pairs, find_line_pairs, point_to_segment_projection
from .tolerance import ANGLE_TOLERANCE, DISTANCE_TOLERANCE


# ============================================================================
# Vector algebra
# ============================================================================

def distance(a, b) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


def square_distance(a, b) -> float:
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.dot(diff, diff))


def cross(a, b) -> np.ndarray:
    return np.cross(np.asarray(a, dtype=float), np.asarray(b, dtype=float))


def dot(a, b) -> float:
    return float(np.dot(np.asarray(a, dtype=float), np.asarray(b, dtype=float)))


def normalise(vector) -> np.ndarray:
    """Unit vector along ``vector``; a zero vector stays zero."""
    v = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(v)
    if norm == 0:
        return np.zeros_like(v)
    return v / norm


def point_segment_square_distance(point, start, end, infinite: bool = False) -> float:
    """Squared distance from ``point`` to the segment (or its supporting line)."""
    _, projection, _ = point_to_segment_projection(
        np.asarray(point, dtype=float), start, end, clamp=not infinite
    )
    return square_distance(point, projection)


def point_line_square_distance(point, line: Line, infinite: bool = False) -> float:
    return point_segment_square_distance(point, line.start, line.end, infinite)


def closest_point_on_segment(point, start, end) -> np.ndarray:
    _, projection, _ = point_to_segment_projection(np.asarray(point, dtype=float), start, end)
    return projection


def polyline_square_distance(point, curve: Polyline) -> float:
    """Squared distance from ``point`` to the nearest segment of ``curve``."""
    pts = curve.points
    if len(pts) == 1:
        return square_distance(point, pts[0])
    return min(
        point_segment_square_distance(point, pts[i], pts[i + 1])
        for i in range(len(pts) - 1)
    )


# ============================================================================
# Directional predicates
# ============================================================================

def is_parallel(v1, v2, angle_tolerance: float = ANGLE_TOLERANCE) -> int:
    """Return 1 if parallel, -1 if anti-parallel, 0 otherwise.

    Zero vectors are never parallel to anything.
    """
    a = normalise(v1)
    b = normalise(v2)
    if not a.any() or not b.any():
        return 0
    if np.linalg.norm(np.cross(a, b)) > np.sin(angle_tolerance):
        return 0
    return 1 if np.dot(a, b) > 0 else -1


def is_collinear(line: Line, other: Line, tolerance: float = DISTANCE_TOLERANCE) -> bool:
    """Check that all four endpoints lie on the supporting line of the longer line."""
    reference, candidate = (line, other) if line.square_length >= other.square_length else (other, line)
    if reference.is_degenerate(tolerance):
        return False
    sq_tol = tolerance * tolerance
    return all(
        point_line_square_distance(p, reference, infinite=True) <= sq_tol
        for p in (candidate.start, candidate.end)
    )


def sort_collinear(points: Sequence) -> List[np.ndarray]:
    """Sort nearly collinear points along their common direction.

    The direction runs from the first point to the point farthest from it.
    Ties keep their input order.
    """
    pts = [as_point(p) for p in points]
    if len(pts) < 2:
        return pts
    origin = pts[0]
    farthest = max(pts, key=lambda p: square_distance(p, origin))
    direction = normalise(farthest - origin)
    return sorted(pts, key=lambda p: float(np.dot(p - origin, direction)))


# ============================================================================
# Intersections
# ============================================================================

def line_intersection(
    line1: Line,
    line2: Line,
    tolerance: float = DISTANCE_TOLERANCE,
    infinite: bool = False,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> Optional[np.ndarray]:
    """Intersection point of two segments (or their supporting lines).

    The point is the midpoint of the closest approach between the two
    supporting lines. Parallel lines, lines passing farther apart than
    ``tolerance`` and points beyond either finite extent return ``None``.

    Args:
        line1: First segment
        line2: Second segment
        tolerance: Distance tolerance
        infinite: Treat both segments as infinite lines
        angle_tolerance: Angle below which the lines count as parallel

    Returns:
        Intersection point, or None

    Examples:
        >>> line_intersection(Line((0, 0), (2, 0)), Line((1, -1), (1, 1)))
        array([1., 0., 0.])
    """
    d1 = line1.end - line1.start
    d2 = line2.end - line2.start
    r = line1.start - line2.start

    a = float(np.dot(d1, d1))
    c = float(np.dot(d2, d2))
    if a == 0.0 or c == 0.0:
        return None

    b = float(np.dot(d1, d2))
    d = float(np.dot(d1, r))
    e = float(np.dot(d2, r))

    denom = a * c - b * b
    # denom / (a * c) is the squared sine of the angle between the lines
    if denom <= np.sin(angle_tolerance) ** 2 * a * c:
        return None

    t1 = (b * e - c * d) / denom
    t2 = (a * e - b * d) / denom

    p1 = line1.start + t1 * d1
    p2 = line2.start + t2 * d2
    sq_tol = tolerance * tolerance
    if square_distance(p1, p2) > sq_tol:
        return None

    point = (p1 + p2) / 2.0
    if not infinite:
        for t, line in ((t1, line1), (t2, line2)):
            if t < 0 and square_distance(line.start, point) > sq_tol:
                return None
            if t > 1 and square_distance(line.end, point) > sq_tol:
                return None

    return point


def segment_intersections(
    line1: Line,
    line2: Line,
    tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> List[np.ndarray]:
    """All intersection points of two segments.

    Crossing segments give one point. Collinear overlapping segments give the
    endpoints of each segment that lie on the other.
    """
    if is_collinear(line1, line2, tolerance):
        sq_tol = tolerance * tolerance
        points = [p for p in line1.control_points() if point_line_square_distance(p, line2) <= sq_tol]
        points += [p for p in line2.control_points() if point_line_square_distance(p, line1) <= sq_tol]
        return points

    point = line_intersection(line1, line2, tolerance, angle_tolerance=angle_tolerance)
    return [] if point is None else [point]


def line_intersections(
    lines: Sequence[Line],
    tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> List[np.ndarray]:
    """Intersection points between every pair of ``lines`` (duplicates kept)."""
    points = []
    for i, j in find_line_pairs(lines, margin=tolerance):
        points.extend(segment_intersections(lines[i], lines[j], tolerance, angle_tolerance))
    return points


def polyline_intersections(
    curve1: Polyline,
    curve2: Polyline,
    tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> List[np.ndarray]:
    """Intersection points between the segments of two polylines (duplicates kept)."""
    segments1 = curve1.segments()
    segments2 = curve2.segments()
    points = []
    for i, j in find_cross_pairs(segments1, segments2, margin=tolerance):
        points.extend(segment_intersections(segments1[i], segments2[j], tolerance, angle_tolerance))
    return points


# ============================================================================
# Planes, orientation and area
# ============================================================================

def fit_plane(points, tolerance: float = DISTANCE_TOLERANCE) -> Optional[Plane]:
    """Least-squares plane through ``points``.

    Returns None for fewer than three points or when the points are
    collinear within ``tolerance``.
    """
    pts = as_points(points)
    if len(pts) < 3:
        return None

    centroid = pts.mean(axis=0)
    _, singular, vt = np.linalg.svd(pts - centroid)
    # RMS spread along the second principal direction
    if singular[1] / np.sqrt(len(pts)) <= tolerance:
        return None

    return Plane(centroid, vt[2] / np.linalg.norm(vt[2]))


def max_plane_deviation(points, plane: Plane) -> float:
    pts = as_points(points)
    if len(pts) == 0:
        return 0.0
    return float(plane.distance_to(pts).max())


def is_coplanar(points, tolerance: float = DISTANCE_TOLERANCE) -> bool:
    """Collinear or fewer than four points are always coplanar."""
    plane = fit_plane(points, tolerance)
    if plane is None:
        return True
    return max_plane_deviation(points, plane) <= tolerance


def polyline_normal(curve: Polyline) -> np.ndarray:
    """Unit normal of a closed polyline by Newell's method (zero if degenerate)."""
    pts = curve.points
    if len(pts) < 3:
        return np.zeros(3)
    centered = pts - pts.mean(axis=0)
    total = np.cross(centered[:-1], centered[1:]).sum(axis=0)
    total += np.cross(centered[-1], centered[0])
    return normalise(total)


def signed_area(region: Polyline, normal) -> float:
    """Area of ``region``, positive when counter-clockwise about ``normal``."""
    pts = region.points
    if len(pts) < 3:
        return 0.0
    centered = pts - pts.mean(axis=0)
    total = np.cross(centered[:-1], centered[1:]).sum(axis=0)
    total += np.cross(centered[-1], centered[0])
    return 0.5 * float(np.dot(total, normalise(normal)))


def area(region: Polyline) -> float:
    """Unsigned area of a closed polyline."""
    normal = polyline_normal(region)
    if not normal.any():
        return 0.0
    return abs(signed_area(region, normal))


def is_clockwise(region: Polyline, normal) -> bool:
    """Check whether ``region`` turns clockwise when viewed from the tip of ``normal``."""
    return signed_area(region, normal) < 0


# ============================================================================
# Containment
# ============================================================================

class PlanarRegion:
    """Closed region prepared for repeated containment queries.

    The region is mapped into a 2D frame on its fitted plane and wrapped in a
    prepared shapely polygon. Points farther than ``tolerance`` from the plane
    are never contained.

    Examples:
        >>> square = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> PlanarRegion(square).contains([(0.5, 0.5)])
        True
    """

    def __init__(self, region: Polyline, tolerance: float = DISTANCE_TOLERANCE):
        self.region = region
        self.tolerance = tolerance
        self.plane = fit_plane(region.points, tolerance)
        if self.plane is None:
            self.frame = None
            self._polygon = None
            self._ring = None
            return

        self.frame = PlaneFrame.from_plane(self.plane)
        coords = self.frame.to_local(region.vertices(tolerance))
        self._ring = LinearRing(coords)
        self._polygon = prep(Polygon(coords))

    def boundary_distance(self, point) -> float:
        p = as_point(point)
        if self.frame is None:
            return float(np.sqrt(polyline_square_distance(p, self.region)))
        return float(self._ring.distance(Point(self.frame.to_local(p)[0])))

    def on_boundary(self, point) -> bool:
        return self.boundary_distance(point) <= self.tolerance

    def contains_point(self, point, include_boundary: bool = True) -> bool:
        p = as_point(point)
        if self.frame is None:
            # Degenerate region: only its boundary can contain anything
            return include_boundary and self.on_boundary(p)
        if self.plane.distance_to(p)[0] > self.tolerance:
            return False
        local = Point(self.frame.to_local(p)[0])
        if self._ring.distance(local) <= self.tolerance:
            return include_boundary
        return self._polygon.contains(local)

    def contains(self, points, include_boundary: bool = True) -> bool:
        """Check that every point lies inside the region."""
        return all(self.contains_point(p, include_boundary) for p in points)


def is_containing(
    region: Polyline,
    points,
    include_boundary: bool = True,
    tolerance: float = DISTANCE_TOLERANCE
) -> bool:
    """Check whether ``region`` contains every point of ``points``.

    Args:
        region: Closed polyline
        points: Points to test
        include_boundary: Count points on the boundary as contained
        tolerance: Distance tolerance for plane and boundary tests

    Returns:
        True if all points are contained

    Examples:
        >>> square = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> is_containing(square, [(1, 0.5)], include_boundary=False)
        False
    """
    return PlanarRegion(region, tolerance).contains(points, include_boundary)


__all__ = [
    'distance',
    'square_distance',
    'cross',
    'dot',
    'normalise',
    'point_segment_square_distance',
    'point_line_square_distance',
    'closest_point_on_segment',
    'polyline_square_distance',
    'is_parallel',
    'is_collinear',
    'sort_collinear',
    'line_intersection',
    'segment_intersections',
    'line_intersections',
    'polyline_intersections',
    'fit_plane',
    'max_plane_deviation',
    'is_coplanar',
    'polyline_normal',
    'signed_area',
    'area',
    'is_clockwise',
    'PlanarRegion',
    'is_containing',
]
