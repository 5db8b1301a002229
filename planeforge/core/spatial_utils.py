"""Common spatial operation utilities.

This module provides spatial indexing helpers used to prune the pairwise
segment tests performed by the intersection, Boolean and clustering code.
Geometry is 3D; the index works on the XY projection of padded bounding
boxes, which is a superset filter for any plane orientation.
"""

from typing import List, Sequence, Set, Tuple

import numpy as np
import shapely
from shapely.strtree import STRtree

from .geometry import Line


def _padded_boxes(lines: Sequence[Line], margin: float) -> List[shapely.Polygon]:
    boxes = []
    for line in lines:
        lo = np.minimum(line.start, line.end) - margin
        hi = np.maximum(line.start, line.end) + margin
        boxes.append(shapely.box(lo[0], lo[1], hi[0], hi[1]))
    return boxes


def _z_overlap(a: Line, b: Line, margin: float) -> bool:
    a_lo, a_hi = sorted((a.start[2], a.end[2]))
    b_lo, b_hi = sorted((b.start[2], b.end[2]))
    return a_lo <= b_hi + margin and b_lo <= a_hi + margin


def find_line_pairs(
    lines: Sequence[Line],
    margin: float = 0.0
) -> List[Tuple[int, int]]:
    """Find pairs of lines whose bounding boxes come within ``margin``.

    Uses STRtree for efficient spatial indexing (O(n log n) instead of O(n²)).
    Returns unique pairs (i, j) where i < j, sorted.

    Args:
        lines: Lines to search
        margin: Padding applied to each bounding box

    Returns:
        List of (index_i, index_j) tuples for candidate line pairs

    Examples:
        >>> lines = [Line((0, 0), (1, 0)), Line((0.5, -1), (0.5, 1)), Line((5, 5), (6, 5))]
        >>> find_line_pairs(lines)
        [(0, 1)]
    """
    if len(lines) < 2:
        return []

    boxes = _padded_boxes(lines, margin)
    tree = STRtree(boxes)

    pairs: Set[Tuple[int, int]] = set()
    for i, box in enumerate(boxes):
        for j in tree.query(box, predicate='intersects'):
            j = int(j)
            if j > i and _z_overlap(lines[i], lines[j], margin):
                pairs.add((i, j))

    return sorted(pairs)


def find_cross_pairs(
    lines_a: Sequence[Line],
    lines_b: Sequence[Line],
    margin: float = 0.0
) -> List[Tuple[int, int]]:
    """Find pairs (i, j) with ``lines_a[i]`` and ``lines_b[j]`` within ``margin``.

    Args:
        lines_a: First set of lines
        lines_b: Second set of lines (indexed)
        margin: Padding applied to each bounding box

    Returns:
        Sorted list of (index_a, index_b) tuples
    """
    if not lines_a or not lines_b:
        return []

    tree = STRtree(_padded_boxes(lines_b, margin))

    pairs = []
    for i, box in enumerate(_padded_boxes(lines_a, margin)):
        for j in sorted(int(k) for k in tree.query(box, predicate='intersects')):
            if _z_overlap(lines_a[i], lines_b[j], margin):
                pairs.append((i, j))

    return pairs


def point_to_segment_projection(
    point: np.ndarray,
    segment_start: np.ndarray,
    segment_end: np.ndarray,
    clamp: bool = True
) -> Tuple[float, np.ndarray, float]:
    """Project a point onto a line segment and calculate distance.

    Uses parametric representation: P(t) = start + t * (end - start)
    where t is clamped to [0, 1] unless ``clamp`` is False.

    Args:
        point: Point coordinates (3D)
        segment_start: Segment start point (3D)
        segment_end: Segment end point (3D)
        clamp: Restrict the projection to the finite segment

    Returns:
        Tuple of (parameter t, projected_point, distance)

    Examples:
        >>> t, proj, dist = point_to_segment_projection(
        ...     np.array([0.5, 1.0, 0.0]), np.zeros(3), np.array([1.0, 0.0, 0.0]))
        >>> t, dist
        (0.5, 1.0)
    """
    line_vec = segment_end - segment_start
    line_len_sq = float(np.dot(line_vec, line_vec))

    # Degenerate segment (start == end)
    if line_len_sq == 0.0:
        return 0.0, segment_start.copy(), float(np.linalg.norm(point - segment_start))

    t = float(np.dot(point - segment_start, line_vec)) / line_len_sq
    if clamp:
        t = max(0.0, min(1.0, t))

    projection = segment_start + t * line_vec
    distance = float(np.linalg.norm(point - projection))

    return t, projection, distance


__all__ = [
    'find_line_pairs',
    'find_cross_pairs',
    'point_to_segment_projection',
]
