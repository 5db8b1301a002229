"""Boolean operations on straight lines.

Two lines only interact when they are collinear. Intersection and difference
split the line at the reference line's endpoints and pick pieces by their
position relative to the reference.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..core.geometry import Line
from ..core.geometry_utils import split_line_at_points
from ..core.primitives import is_collinear, point_line_square_distance, sort_collinear, square_distance
from ..core.tolerance import DISTANCE_TOLERANCE


def _centroid(line: Line) -> np.ndarray:
    return (line.start + line.end) / 2.0


def _touches(line: Line, other: Line, sq_tol: float) -> bool:
    return any(point_line_square_distance(p, other) <= sq_tol for p in (line.start, line.end))


# ============================================================================
# Union
# ============================================================================

def union_line(
    line: Line,
    ref_line: Line,
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Line]:
    """Union of two lines.

    Collinear lines that touch or overlap merge into the line spanning their
    extreme points; anything else comes back as both lines unchanged.

    Examples:
        >>> union_line(Line((0, 0), (2, 0)), Line((1, 0), (3, 0)))
        [Line([0.0, 0.0, 0.0], [3.0, 0.0, 0.0])]
    """
    if line.is_degenerate(tolerance):
        return [] if ref_line.is_degenerate(tolerance) else [ref_line.copy()]
    if ref_line.is_degenerate(tolerance):
        return [line.copy()]

    sq_tol = tolerance * tolerance
    if is_collinear(line, ref_line, tolerance):
        if _touches(line, ref_line, sq_tol) or _touches(ref_line, line, sq_tol):
            ordered = sort_collinear(line.control_points() + ref_line.control_points())
            return [Line(ordered[0], ordered[-1])]

    return [line.copy(), ref_line.copy()]


def union_lines(
    lines: Sequence[Line],
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Line]:
    """Merge every pair of collinear overlapping lines until none is left.

    Degenerate lines are dropped.
    """
    result = [line.copy() for line in lines if not line.is_degenerate(tolerance)]

    merged = True
    while merged:
        merged = False
        for i in range(len(result) - 1):
            for j in range(i + 1, len(result)):
                combined = union_line(result[i], result[j], tolerance)
                if len(combined) == 1:
                    result[i] = combined[0]
                    del result[j]
                    merged = True
                    break
            if merged:
                break

    return result


# ============================================================================
# Intersection
# ============================================================================

def intersect_line(
    line: Line,
    ref_line: Line,
    tolerance: float = DISTANCE_TOLERANCE
) -> Optional[Line]:
    """Overlap of two collinear lines, or None.

    Non-collinear lines never overlap; their crossing point is a primitive
    query (:func:`planeforge.core.line_intersection`).

    Examples:
        >>> intersect_line(Line((0, 0), (2, 0)), Line((1, 0), (3, 0)))
        Line([1.0, 0.0, 0.0], [2.0, 0.0, 0.0])
    """
    if line.is_degenerate(tolerance) or ref_line.is_degenerate(tolerance):
        return None
    if not is_collinear(line, ref_line, tolerance):
        return None

    sq_tol = tolerance * tolerance
    ref_centroid = _centroid(ref_line)
    pieces = split_line_at_points(line, ref_line.control_points(), tolerance)

    if len(pieces) == 3:
        return pieces[1]
    if len(pieces) == 2:
        # Keep the piece on the side of the reference centroid
        if square_distance(line.start, ref_centroid) < square_distance(line.end, ref_centroid):
            return pieces[0]
        return pieces[1]

    if (point_line_square_distance(ref_centroid, pieces[0]) > sq_tol
            and point_line_square_distance(_centroid(line), ref_line) > sq_tol):
        return None
    return line.copy()


def intersect_line_with_lines(
    line: Line,
    ref_lines: Sequence[Line],
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Line]:
    """Pieces of ``line`` overlapped by any of ``ref_lines``."""
    result = []
    for ref in union_lines(ref_lines, tolerance):
        overlap = intersect_line(line, ref, tolerance)
        if overlap is not None:
            result.append(overlap)
    return result


def intersect_lines(
    lines: Sequence[Line],
    tolerance: float = DISTANCE_TOLERANCE
) -> Optional[Line]:
    """Common overlap of all ``lines``, or None."""
    if not lines:
        return None

    result = lines[0].copy()
    for line in lines[1:]:
        result = intersect_line(result, line, tolerance)
        if result is None:
            return None
    return result


# ============================================================================
# Difference
# ============================================================================

def subtract_line(
    line: Line,
    ref_line: Line,
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Line]:
    """Pieces of ``line`` not overlapped by ``ref_line``.

    Examples:
        >>> subtract_line(Line((0, 0), (3, 0)), Line((1, 0), (2, 0)))
        [Line([0.0, 0.0, 0.0], [1.0, 0.0, 0.0]), Line([2.0, 0.0, 0.0], [3.0, 0.0, 0.0])]
    """
    if line.is_degenerate(tolerance):
        return []
    if ref_line.is_degenerate(tolerance) or not is_collinear(line, ref_line, tolerance):
        return [line.copy()]

    sq_tol = tolerance * tolerance
    ref_centroid = _centroid(ref_line)
    pieces = split_line_at_points(line, ref_line.control_points(), tolerance)

    if len(pieces) == 3:
        return [pieces[0], pieces[2]]
    if len(pieces) == 2:
        # Drop the piece on the side of the reference centroid
        if square_distance(line.start, ref_centroid) < square_distance(line.end, ref_centroid):
            return [pieces[1]]
        return [pieces[0]]

    if (point_line_square_distance(ref_centroid, pieces[0]) > sq_tol
            and point_line_square_distance(_centroid(line), ref_line) > sq_tol):
        return [line.copy()]
    return []


def subtract_lines(
    lines: Sequence[Line],
    ref_lines: Sequence[Line],
    tolerance: float = DISTANCE_TOLERANCE
) -> List[Line]:
    """Pieces of ``lines`` not overlapped by any of ``ref_lines``."""
    result = []
    for line in lines:
        pieces = [line.copy()]
        for ref in ref_lines:
            pieces = [piece for p in pieces for piece in subtract_line(p, ref, tolerance)]
            if not pieces:
                break
        result.extend(pieces)
    return result


__all__ = [
    'union_line',
    'union_lines',
    'intersect_line',
    'intersect_line_with_lines',
    'intersect_lines',
    'subtract_line',
    'subtract_lines',
]
