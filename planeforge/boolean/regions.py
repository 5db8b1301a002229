"""Boolean operations on closed regions.

Both boundaries are split at their mutual intersection points, each piece is
classified against the other region with a representative-point containment
test (its vertices plus the midpoint of each of its segments), and the kept
pieces are joined back into closed loops.
"""

import logging
import warnings
from typing import List, Sequence, Tuple

import numpy as np

from ..clustering import cull_duplicates
from ..core.errors import NonConvergenceWarning, TopologyWarning
from ..core.geometry import Polyline
from ..core.geometry_utils import join, split_polyline_at_points
from ..core.primitives import (
    PlanarRegion,
    area,
    fit_plane,
    is_clockwise,
    is_coplanar,
    polyline_intersections,
    polyline_normal,
    signed_area,
    square_distance,
)
from ..core.tolerance import DISTANCE_TOLERANCE
from ..core.validation_utils import require_regions

logger = logging.getLogger(__name__)


# ============================================================================
# Private helpers
# ============================================================================

def _representative_points(curve: Polyline) -> np.ndarray:
    return np.vstack([curve.points, curve.segment_midpoints()])


def _same_arc(curve: Polyline, other: Polyline, sq_tol: float) -> bool:
    if len(curve) != len(other):
        return False
    return all(square_distance(a, b) <= sq_tol for a, b in zip(curve.points, other.points))


def _unique_arcs(arcs: Sequence[Polyline], tolerance: float) -> List[Polyline]:
    """Drop arcs equal to an earlier arc in either direction."""
    sq_tol = tolerance * tolerance
    unique: List[Polyline] = []
    for arc in arcs:
        flipped = arc.flip()
        if not any(_same_arc(arc, u, sq_tol) or _same_arc(flipped, u, sq_tol) for u in unique):
            unique.append(arc)
    return unique


def _orient_clockwise(region: Polyline, normal: np.ndarray) -> Polyline:
    return region.copy() if is_clockwise(region, normal) else region.flip()


def _orient_against(loop: Polyline, container: Polyline) -> Polyline:
    """Copy of ``loop`` turning the opposite way to ``container``."""
    if signed_area(loop, polyline_normal(container)) < 0:
        return loop.copy()
    return loop.flip()


def _separate_openings(regions: Sequence[Polyline], tolerance: float) -> Tuple[List[Polyline], List[Polyline]]:
    """Split ``regions`` into outer loops and openings.

    An opening lies inside a larger region and runs against it, the way
    :func:`union_regions` returns the openings it encloses.
    """
    queries = [PlanarRegion(region, tolerance) for region in regions]
    normals = [polyline_normal(region) for region in regions]
    areas = [area(region) for region in regions]

    outers, openings = [], []
    for i, region in enumerate(regions):
        samples = _representative_points(region)
        inside = any(
            areas[j] > areas[i]
            and signed_area(region, normals[j]) < 0
            and queries[j].contains(samples)
            for j in range(len(regions)) if j != i
        )
        (openings if inside else outers).append(region)
    return outers, openings


def _orient_openings(openings: Sequence[Polyline], outers: Sequence[Polyline],
                     tolerance: float) -> List[Polyline]:
    """Turn each opening against the smallest outer loop holding it."""
    containers = [(area(outer), PlanarRegion(outer, tolerance), outer) for outer in outers]
    oriented = []
    for opening in openings:
        holding = [(size, outer) for size, query, outer in containers if query.contains(opening.points)]
        if holding:
            oriented.append(_orient_against(opening, min(holding, key=lambda item: item[0])[1]))
        else:
            oriented.append(opening)
    return oriented


def _region_normal(region: Polyline, tolerance: float) -> np.ndarray:
    plane = fit_plane(region.points, tolerance)
    return plane.normal if plane is not None else np.array([0.0, 0.0, 1.0])


def _intersection_points(region: Polyline, others: Sequence[Polyline], tolerance: float) -> List[np.ndarray]:
    points = []
    for other in others:
        points.extend(polyline_intersections(region, other, tolerance))
    return cull_duplicates(points, tolerance) if points else []


def _closed_loops(curves: Sequence[Polyline], tolerance: float, operation: str) -> List[Polyline]:
    """Keep closed curves with non-zero area, reporting pieces that failed to close."""
    sq_tol = tolerance * tolerance
    loops = []
    for curve in curves:
        if not curve.is_closed(tolerance):
            if curve.length > tolerance:
                warnings.warn(
                    f"{operation} left an open boundary piece of length {curve.length:.6g}; it was dropped",
                    TopologyWarning,
                    stacklevel=3,
                )
            continue
        if area(curve) > sq_tol:
            loops.append(curve)
    return loops


# ============================================================================
# Union
# ============================================================================

def union_region(
    region: Polyline,
    ref_region: Polyline,
    tolerance: float = DISTANCE_TOLERANCE
) -> Tuple[bool, List[Polyline]]:
    """Union of two closed regions.

    Args:
        region: First closed region
        ref_region: Second closed region
        tolerance: Distance tolerance

    Returns:
        Tuple of (combined, regions). ``combined`` is False when the regions
        are not coplanar or do not overlap; ``regions`` then holds copies of
        both inputs. When the union encloses openings, the extra loops are
        returned after the outer one, running against it.

    Raises:
        ValidationError: If either curve is not closed

    Examples:
        >>> a = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> b = Polyline([(0.5, 0), (1.5, 0), (1.5, 1), (0.5, 1), (0.5, 0)])
        >>> combined, regions = union_region(a, b)
        >>> combined, round(area(regions[0]), 6)
        (True, 1.5)
    """
    require_regions([region, ref_region], tolerance)
    unchanged = [region.copy(), ref_region.copy()]

    if not is_coplanar(np.vstack([region.points, ref_region.points]), tolerance):
        return False, unchanged

    normal = _region_normal(region, tolerance)
    region1 = _orient_clockwise(region, normal)
    region2 = _orient_clockwise(ref_region, normal)
    query1 = PlanarRegion(region1, tolerance)
    query2 = PlanarRegion(region2, tolerance)

    if query1.contains(_representative_points(region2)):
        return True, [region1]
    if query2.contains(_representative_points(region1)):
        return True, [region2]

    points = _intersection_points(region1, [region2], tolerance)
    pieces1 = split_polyline_at_points(region1, points, tolerance)
    pieces2 = split_polyline_at_points(region2, points, tolerance)
    if len(pieces1) == 1 and len(pieces2) == 1:
        return False, unchanged

    sq_tol = tolerance * tolerance
    kept: List[Polyline] = []
    for piece in pieces1:
        samples = _representative_points(piece)
        if not query2.contains(samples):
            kept.append(piece)
        elif not query2.contains(samples, include_boundary=False):
            # Shared boundary: keep it once if both regions run along it the same way
            if any(_same_arc(piece, other, sq_tol) for other in pieces2):
                kept.append(piece)

    kept.extend(piece for piece in pieces2 if not query1.contains(_representative_points(piece)))

    loops = _closed_loops(join(kept, tolerance), tolerance, "Union")
    if not loops:
        return False, unchanged

    loops.sort(key=area, reverse=True)
    outer = _orient_clockwise(loops[0], normal)
    return True, [outer] + [_orient_against(loop, outer) for loop in loops[1:]]


def union_regions(
    regions: Sequence[Polyline],
    tolerance: float = DISTANCE_TOLERANCE,
    max_iterations: int = 10000
) -> List[Polyline]:
    """Union of any number of closed regions.

    Regions are merged into a running accumulator. When a merge encloses an
    opening, the opening is set aside and, at the end, whatever part of it no
    input region covers is returned after the outer loops. Openings run
    against the loop holding them.

    An input loop lying inside a larger input loop and running against it is
    read as an opening of that loop and cut out of the union instead of
    merged into it, so a union fed its own result returns it unchanged.

    Args:
        regions: Closed regions
        tolerance: Distance tolerance
        max_iterations: Cap on pairwise union attempts

    Returns:
        Outer loops followed by the openings

    Examples:
        >>> squares = [Polyline([(x, 0), (x + 1, 0), (x + 1, 1), (x, 1), (x, 0)]) for x in (0, 0.5, 1)]
        >>> round(area(union_regions(squares)[0]), 6)
        2.0
    """
    require_regions(regions, tolerance)
    sq_tol = tolerance * tolerance
    inputs = [region.copy() for region in regions if area(region) > sq_tol]
    outers, holes = _separate_openings(inputs, tolerance)

    pending = [region.copy() for region in outers]
    result: List[Polyline] = []
    openings: List[Polyline] = []
    attempts = 0

    while pending:
        accumulator = pending.pop(0)
        merged = True
        while merged:
            merged = False
            for i, other in enumerate(pending):
                attempts += 1
                if attempts > max_iterations:
                    warnings.warn(
                        f"Union stopped after {max_iterations} pairwise attempts; "
                        "returning the partially merged regions",
                        NonConvergenceWarning,
                        stacklevel=2,
                    )
                    return result + [accumulator] + pending + openings + holes

                combined, loops = union_region(accumulator, other, tolerance)
                if combined:
                    accumulator = loops[0]
                    openings.extend(loops[1:])
                    del pending[i]
                    merged = True
                    break
        result.append(accumulator)

    if openings:
        logger.debug("Union enclosed %d opening(s)", len(openings))
        openings = subtract_regions(openings, outers, tolerance)
    if holes:
        result, cut = _subtract_each(result, holes, tolerance)
        openings = openings + cut

    return result + _orient_openings(openings, result, tolerance)


# ============================================================================
# Intersection
# ============================================================================

def intersect_region(
    region: Polyline,
    ref_region: Polyline,
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Polyline]:
    """Intersection of two closed regions.

    Returns an empty list when the regions are not coplanar or only touch.

    Raises:
        ValidationError: If either curve is not closed
    """
    require_regions([region, ref_region], tolerance)
    if not is_coplanar(np.vstack([region.points, ref_region.points]), tolerance):
        return []

    normal = _region_normal(region, tolerance)
    region1 = _orient_clockwise(region, normal)
    region2 = _orient_clockwise(ref_region, normal)
    query1 = PlanarRegion(region1, tolerance)
    query2 = PlanarRegion(region2, tolerance)

    points = _intersection_points(region1, [region2], tolerance)
    kept = [
        piece for piece in split_polyline_at_points(region1, points, tolerance)
        if query2.contains(_representative_points(piece))
    ]
    kept += [
        piece for piece in split_polyline_at_points(region2, points, tolerance)
        if query1.contains(_representative_points(piece))
    ]

    return _closed_loops(join(_unique_arcs(kept, tolerance), tolerance), tolerance, "Intersection")


def intersect_regions(
    regions: Sequence[Polyline],
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Polyline]:
    """Region covered by every one of ``regions``."""
    require_regions(regions, tolerance)
    if not regions:
        return []

    sq_tol = tolerance * tolerance
    result = [regions[0].copy()]
    for ref in regions[1:]:
        if area(ref) <= sq_tol:
            return []
        result = [piece for region in result for piece in intersect_region(region, ref, tolerance)]
        if not result:
            return []
    return result


# ============================================================================
# Difference
# ============================================================================

def subtract_region(
    region: Polyline,
    ref_region: Polyline,
    tolerance: float = DISTANCE_TOLERANCE
) -> Tuple[List[Polyline], bool]:
    """Difference of two closed regions.

    Args:
        region: Region to cut from
        ref_region: Region to remove
        tolerance: Distance tolerance

    Returns:
        Tuple of (regions, is_opening). When ``ref_region`` lies strictly
        inside ``region`` nothing is cut; the result is ``[region,
        ref_region]`` with ``is_opening`` True, the second loop being a hole
        turned against the first.

    Raises:
        ValidationError: If either curve is not closed
    """
    require_regions([region, ref_region], tolerance)
    if not is_coplanar(np.vstack([region.points, ref_region.points]), tolerance):
        return [region.copy()], False

    cut_regions = intersect_region(region, ref_region, tolerance)
    points = _intersection_points(region, cut_regions, tolerance)
    pieces = split_polyline_at_points(region, points, tolerance)
    query = PlanarRegion(region, tolerance)

    if len(pieces) == 1:
        if cut_regions and query.contains(ref_region.points):
            return [region.copy(), _orient_against(ref_region, region)], True
        return [region.copy()], False

    cut_queries = [PlanarRegion(cut, tolerance) for cut in cut_regions]
    kept = [
        piece for piece in pieces
        if not any(q.contains(_representative_points(piece)) for q in cut_queries)
    ]

    for cut in cut_regions:
        for piece in split_polyline_at_points(cut, points, tolerance):
            samples = _representative_points(piece)
            if query.contains(samples) and not all(query.on_boundary(p) for p in samples):
                kept.append(piece.flip())

    return _closed_loops(join(kept, tolerance), tolerance, "Difference"), False


def _subtract_each(
    regions: Sequence[Polyline],
    ref_regions: Sequence[Polyline],
    tolerance: float
) -> Tuple[List[Polyline], List[Polyline]]:
    result: List[Polyline] = []
    openings: List[Polyline] = []
    for region in regions:
        pieces = [region.copy()]
        for ref in ref_regions:
            next_pieces = []
            for piece in pieces:
                cut, is_opening = subtract_region(piece, ref, tolerance)
                if is_opening:
                    next_pieces.append(cut[0])
                    openings.extend(cut[1:])
                else:
                    next_pieces.extend(cut)
            pieces = next_pieces
            if not pieces:
                break
        result.extend(pieces)

    return result, openings


def subtract_regions(
    regions: Sequence[Polyline],
    ref_regions: Sequence[Polyline],
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Polyline]:
    """Subtract every one of ``ref_regions`` from every one of ``regions``.

    Openings created along the way are appended after the cut regions.
    """
    require_regions(list(regions) + list(ref_regions), tolerance)
    pieces, openings = _subtract_each(regions, ref_regions, tolerance)
    return pieces + openings


__all__ = [
    'union_region',
    'union_regions',
    'intersect_region',
    'intersect_regions',
    'subtract_region',
    'subtract_regions',
]
