"""Repair of corners whose adjacent segments fold back onto each other.

When the two segments meeting at a vertex are anti-parallel the average of
their orthogonals vanishes and the vertex has no usable translation. Such a
spike either points away from the offset direction (outward: a zero-length
segment is inserted to turn the spike into two right angles) or into it
(inward: the spike is cut away).
"""

import logging
from typing import List

import numpy as np

from ..core.primitives import distance, dot, is_parallel, normalise
from ..core.types import CornerType
from .structures import OffsetRun, OffsetSegment, OffsetVertex

logger = logging.getLogger(__name__)


def _neighbour_tangent(segments: List[OffsetSegment], closed: bool, start: int, stop: int,
                       step: int, reference: np.ndarray, angle_tolerance: float):
    """Walk from ``start`` in direction ``step`` to the first tangent not parallel to ``reference``.

    Returns (tangent or None, indices of the parallel run, all_parallel).
    """
    count = len(segments)
    index = start
    if closed:
        index %= count
    run = []
    if index < 0 or index >= count:
        return None, run, False

    tangent = segments[index].tangent
    while is_parallel(tangent, reference, angle_tolerance) != 0:
        run.append(index)
        index += step
        if index < 0 or index >= count:
            if not closed:
                return None, run, False
            index %= count
        if index == stop:
            return None, run, True
        tangent = segments[index].tangent
    return tangent, run, False


def classify_corner(
    segments: List[OffsetSegment],
    closed: bool,
    i: int,
    prev: int,
    angle_tolerance: float,
    distance_tolerance: float
) -> CornerType:
    """Decide whether the folded corner at vertex ``i`` is outward or inward.

    The incoming run (segment ``prev`` and any parallel predecessors) and the
    outgoing run (segment ``i`` and any parallel successors) are compared with
    the first non-parallel segments beyond them. The shorter run decides which
    of those neighbours is tested against the incoming orthogonal.
    """
    t1 = segments[prev].tangent
    orthogonal = segments[prev].orthogonal

    t0, before, looped = _neighbour_tangent(segments, closed, i - 2, i, -1, t1, angle_tolerance)
    if looped:
        return CornerType.INWARD
    t3, after, looped = _neighbour_tangent(segments, closed, i + 1, prev, 1, t1, angle_tolerance)
    if looped:
        return CornerType.INWARD

    before = [prev] + before
    after = [i] + after

    if t0 is not None and t3 is not None:
        length_difference = sum(segments[k].length for k in before) - sum(segments[k].length for k in after)
        t0n = dot(t0, orthogonal)
        t3n = dot(t3, orthogonal)
        if abs(length_difference) < distance_tolerance:
            if t0n * t3n < 0:
                if t0n < 0:
                    outward = -dot(t0, t1) > dot(t3, t1)
                else:
                    outward = -dot(t0, t1) < dot(t3, t1)
            else:
                outward = t0n < 0
        elif length_difference < 0:
            outward = t0n < 0
        else:
            outward = t3n < 0
    elif t3 is not None:
        outward = dot(t3, orthogonal) < 0
    elif t0 is not None:
        outward = dot(t0, orthogonal) < 0
    else:
        outward = False

    return CornerType.OUTWARD if outward else CornerType.INWARD


def _insert_miter(vertices: List[OffsetVertex], segments: List[OffsetSegment],
                  normal: np.ndarray, i: int, prev: int) -> None:
    tangent = normalise(segments[i].orthogonal - segments[prev].orthogonal)
    if i <= prev:
        prev += 1
    vertices.insert(i, OffsetVertex(position=vertices[i].position.copy()))
    segments.insert(i, OffsetSegment(tangent, normalise(np.cross(tangent, normal)), 0.0))

    segments[prev].compute_length_change = True
    segments[(i + 1) % len(segments)].compute_length_change = True
    vertices[(i + 1) % len(vertices)].compute_translation = True


def _cut_spike(vertices: List[OffsetVertex], segments: List[OffsetSegment], closed: bool,
               normal: np.ndarray, i: int, prev: int, tolerance: float) -> bool:
    following = vertices[(i + 1) % len(vertices)]

    if distance(vertices[prev].position, following.position) < tolerance:
        # Both flanks of the spike coincide: drop the tip and the vertex before it
        following.compute_translation = True
        del vertices[i]
        del segments[i]
        if i < prev:
            prev -= 1
        del vertices[prev]
        del segments[prev]
        if len(vertices) <= 1:
            return False

        if i >= 2:
            segments[i - 2].compute_length_change = True
            segments[(i - 1) % len(segments)].compute_length_change = True
        else:
            segments[0].compute_length_change = True
            if closed:
                segments[-1].compute_length_change = True
        return True

    del vertices[i]
    del segments[i]
    if len(vertices) <= 1:
        return False
    if i < prev:
        prev -= 1

    nxt = i % len(vertices)
    segments[prev] = OffsetSegment.between(vertices[prev].position, vertices[nxt].position, normal)
    vertices[prev].compute_translation = True
    vertices[nxt].compute_translation = True
    segments[i % len(segments)].compute_length_change = True
    return True


def repair_corner(
    vertices: List[OffsetVertex],
    segments: List[OffsetSegment],
    run: OffsetRun,
    i: int,
    prev: int,
    first_iteration: bool
) -> bool:
    """Repair the folded corner at vertex ``i`` in place.

    Only the first step of a run can meet an outward corner; later folds are
    always produced by the offset itself and point inward.

    Returns:
        False when the repair leaves one vertex or fewer, meaning the loop has
        vanished
    """
    corner = CornerType.INWARD
    if first_iteration:
        corner = classify_corner(segments, run.closed, i, prev, run.angle_tolerance, run.distance_tolerance)

    logger.debug("Repairing %s folded corner at vertex %d", corner.value, i)
    if corner == CornerType.OUTWARD:
        _insert_miter(vertices, segments, run.normal, i, prev)
        return True
    return _cut_spike(vertices, segments, run.closed, run.normal, i, prev, run.distance_tolerance)


__all__ = [
    'classify_corner',
    'repair_corner',
]
