"""Multi-distance offsetting of planar polylines.

Every vertex moves along its translation vector while every segment slides
along its orthogonal. The offset advances in steps: each step is as long as
possible without a segment shrinking to zero length or a vertex running into
a non-adjacent segment. Vanished segments are removed between steps and a
collision splits the curve into separate loops that are offset on their own.
"""

import logging
import math
import warnings
from dataclasses import replace
from typing import List, Optional, Sequence

import numpy as np

from ..core.errors import NonCombinableWarning, NonConvergenceWarning, ValidationError
from ..core.geometry import Polyline, as_point
from ..core.primitives import cross, distance, dot, normalise, polyline_normal, square_distance
from ..core.tolerance import ANGLE_TOLERANCE, DISTANCE_TOLERANCE, boundary_tolerance
from ..core.validation_utils import is_planar
from .corners import repair_corner
from .loops import split_into_loops
from .structures import OffsetLoop, OffsetOptions, OffsetRun, OffsetSegment, OffsetVertex

logger = logging.getLogger(__name__)


# ============================================================================
# Setup
# ============================================================================

def _offset_normal(curve: Polyline, closed: bool, normal, tolerance: float) -> Optional[np.ndarray]:
    if normal is not None:
        return normalise(as_point(normal))
    if closed:
        return polyline_normal(curve)

    pts = curve.points
    first = pts[1] - pts[0]
    for point in pts[2:]:
        candidate = cross(first, point - pts[0])
        if np.linalg.norm(candidate) >= tolerance:
            return normalise(candidate)
    return None


def _build_records(curve: Polyline, closed: bool, normal: np.ndarray, options: OffsetOptions,
                   tolerance: float):
    points = list(curve.points[:-1] if closed else curve.points)

    kept = [points[0]]
    for point in points[1:]:
        if options.remove_short_segments and distance(point, kept[-1]) < tolerance:
            continue
        kept.append(point)
    if closed and options.remove_short_segments:
        while len(kept) > 1 and distance(kept[-1], kept[0]) < tolerance:
            kept.pop()

    if len(kept) < (3 if closed else 2):
        return None, None

    edge_count = len(kept) if closed else len(kept) - 1
    segments = [
        OffsetSegment.between(kept[k], kept[(k + 1) % len(kept)], normal)
        for k in range(edge_count)
    ]
    vertices = [
        OffsetVertex(position=p.copy(), compute_intersection=options.handle_global_self_intersections)
        for p in kept
    ]
    return vertices, segments


def _increments(distances: Sequence[float]) -> List[float]:
    ordered = sorted(distances)
    return [d - p for d, p in zip(ordered, [0.0] + ordered[:-1])]


# ============================================================================
# Recomputation passes (work on the vertex and segment records)
# ============================================================================

def _update_translations(vertices: List[OffsetVertex], segments: List[OffsetSegment],
                         run: OffsetRun, first_iteration: bool) -> bool:
    """Refresh stale vertex translations. Returns False if the loop collapsed."""
    options = run.options
    sin_tol = math.sin(run.angle_tolerance / 2) ** 2

    recheck = True
    while recheck:
        recheck = False
        count = len(vertices)
        for i in range(count):
            vertex = vertices[i]
            if not vertex.compute_translation:
                continue
            vertex.compute_translation = False
            vertex.compute_intersection = options.handle_global_self_intersections

            if not run.closed and (i == 0 or i == count - 1):
                # Open ends follow their single segment
                segment = segments[0] if i == 0 else segments[i - 1]
                vertex.translation = segment.orthogonal.copy()
                vertex.adjacent_length_change = 0.0
                segment.compute_length_change = True
                continue

            prev = i - 1 if i > 0 else len(segments) - 1
            incoming, outgoing = segments[prev], segments[i]
            direction = (incoming.orthogonal + outgoing.orthogonal) / 2.0
            square_length = float(np.dot(direction, direction))

            if options.handle_adjacent_parallel_segments and square_length < sin_tol:
                if not repair_corner(vertices, segments, run, i, prev, first_iteration):
                    return False
                recheck = True
                break

            if square_length == 0.0:
                vertex.translation = outgoing.orthogonal.copy()
                vertex.adjacent_length_change = 0.0
            else:
                vertex.translation = direction / square_length
                vertex.adjacent_length_change = dot(incoming.tangent, vertex.translation)
            incoming.compute_length_change = True
            outgoing.compute_length_change = True

    return True


def _update_length_changes(vertices: List[OffsetVertex], segments: List[OffsetSegment]) -> None:
    count = len(vertices)
    for i, segment in enumerate(segments):
        if not segment.compute_length_change:
            continue
        segment.length_change = (
            vertices[i].adjacent_length_change + vertices[(i + 1) % count].adjacent_length_change
        )
        segment.compute_length_change = False


def _vanishing_limit(segments: List[OffsetSegment], limit: float) -> float:
    """Largest step before any shrinking segment reaches zero length."""
    for segment in segments:
        if segment.length_change < 0:
            limit = min(limit, segment.length / -segment.length_change)
    return limit


def _update_collisions(vertices: List[OffsetVertex], segments: List[OffsetSegment],
                       closed: bool, reach: float, tolerance: float) -> float:
    """Refresh stale collision forecasts and return the step to the first collision.

    Vertex ``v`` meets the line of segment ``s`` after an offset ``r`` solving
    ``dot(o, v + r * t - start) = r``. The hit only counts when the struck
    point lies on the offset segment at that moment, endpoints included, and
    the segment has not shrunk below ``tolerance``.
    """
    count = len(vertices)
    slack = boundary_tolerance(tolerance)
    for i, vertex in enumerate(vertices):
        if not closed and (i == 0 or i == count - 1):
            continue
        if not vertex.compute_intersection:
            continue
        vertex.compute_intersection = False
        vertex.any_segment_in_range = False

        best = reach
        hit = -1
        skipped = (i - 1) % len(segments)
        for j, segment in enumerate(segments):
            if j == i or j == skipped:
                continue
            denominator = dot(segment.orthogonal, vertex.translation) - 1.0
            if denominator == 0.0:
                continue

            start = vertices[j]
            required = dot(segment.orthogonal, start.position - vertex.position) / denominator
            if not 0.0 < required < best:
                continue
            vertex.any_segment_in_range = True

            end = vertices[(j + 1) % count]
            moved = vertex.position + required * vertex.translation
            start_moved = start.position + required * start.translation
            end_moved = end.position + required * end.translation
            sq_length = square_distance(start_moved, end_moved)
            if sq_length <= tolerance * tolerance:
                continue
            sq_reach = (math.sqrt(sq_length) + slack) ** 2
            if square_distance(moved, start_moved) <= sq_reach and square_distance(moved, end_moved) <= sq_reach:
                best = required
                hit = j

        if hit != -1:
            vertex.offset_until_intersection = best
            vertex.segment_intersected = hit
        elif vertex.segment_intersected != -1:
            vertex.reset_collision()

    limit = reach
    for vertex in vertices:
        if vertex.segment_intersected != -1:
            limit = min(limit, vertex.offset_until_intersection)
    return limit


def _remove_vanished(vertices: List[OffsetVertex], segments: List[OffsetSegment],
                     step: float, tolerance: float) -> int:
    """Advance segment lengths by ``step``; drop segments that vanished with their start vertex."""
    count = len(vertices)
    vanished = []
    for i, segment in enumerate(segments):
        length = segment.length + segment.length_change * step
        if length < tolerance:
            vanished.append(i)
            vertices[(i + 1) % count].compute_translation = True
        else:
            segment.length = length

    for i in reversed(vanished):
        del vertices[i]
        del segments[i]
    return len(vanished)


def _close_if_converged(vertices: List[OffsetVertex], run: OffsetRun) -> OffsetRun:
    """An open curve whose ends have met becomes a closed one."""
    if run.closed or len(vertices) < 4:
        return run
    if distance(vertices[0].position, vertices[-1].position) >= run.distance_tolerance:
        return run

    logger.debug("Open offset curve closed on itself")
    vertices.pop()
    for vertex in vertices:
        vertex.compute_translation = True
        vertex.reset_collision()
    return replace(run, closed=True)


def _snapshot(vertices: List[OffsetVertex], closed: bool) -> OffsetLoop:
    return OffsetLoop(np.array([v.position for v in vertices]), closed)


# ============================================================================
# Iteration
# ============================================================================

def _iterate(
    vertices: List[OffsetVertex],
    segments: List[OffsetSegment],
    increments: List[float],
    run: OffsetRun,
    first_iteration: bool
) -> List[OffsetLoop]:
    """Offset the working curve by each of ``increments`` in turn.

    Returns one snapshot per completed increment; when the curve splits, the
    snapshots of every resulting loop follow.
    """
    options = run.options
    track_lengths = options.handle_local_self_intersections
    track_collisions = options.handle_global_self_intersections
    finished: List[OffsetLoop] = []

    pending = list(increments)
    while pending:
        offset = pending.pop(0)
        steps = 0
        while offset > 0 and steps < options.bailout:
            steps += 1
            if not vertices or not segments or (run.closed and len(vertices) < 3):
                return finished
            if not _update_translations(vertices, segments, run, first_iteration):
                return finished

            step = offset
            if track_lengths:
                _update_length_changes(vertices, segments)
                step = _vanishing_limit(segments, step)
            if track_collisions:
                step = min(step, _update_collisions(vertices, segments, run.closed, offset + sum(pending),
                                                    run.distance_tolerance))

            for vertex in vertices:
                vertex.position = vertex.position + vertex.translation * step
            offset -= step
            first_iteration = False

            if offset > 0:
                removed = 0
                if track_lengths:
                    removed = _remove_vanished(vertices, segments, step, run.distance_tolerance)
                    run = _close_if_converged(vertices, run)
                if not track_collisions:
                    continue
                if removed:
                    for vertex in vertices:
                        if vertex.any_segment_in_range:
                            vertex.compute_intersection = True
                    continue

                collisions = []
                for vertex in vertices:
                    if vertex.segment_intersected == -1:
                        continue
                    remaining = vertex.offset_until_intersection - step
                    if remaining < run.distance_tolerance:
                        segment = segments[vertex.segment_intersected]
                        collisions.append((vertex, segment))
                        vertex.compute_translation = True
                        segment.recompute_length = True
                    else:
                        vertex.offset_until_intersection = remaining

                if collisions:
                    rest = [offset] + pending
                    for chain in split_into_loops(vertices, segments, collisions, run):
                        finished.extend(_iterate(
                            chain.vertices, chain.segments, rest, replace(run, closed=chain.closed), False
                        ))
                    return finished

            elif pending:
                if track_lengths:
                    for segment in segments:
                        segment.length += segment.length_change * step
                if track_collisions:
                    for vertex in vertices:
                        if vertex.segment_intersected != -1:
                            vertex.offset_until_intersection -= step

        if offset > 0:
            warnings.warn(
                f"Offset stopped after {options.bailout} steps with {offset:.6g} left; "
                "returning the partially offset curve",
                NonConvergenceWarning,
                stacklevel=3,
            )
        finished.append(_snapshot(vertices, run.closed))

    return finished


# ============================================================================
# Public API
# ============================================================================

def multi_offset(
    curve: Polyline,
    offsets: Sequence[float],
    normal=None,
    options: Optional[OffsetOptions] = None,
    only_largest_per_step: bool = False,
    distance_tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> Optional[List[Polyline]]:
    """Offset a planar polyline by several distances at once.

    Positive distances move the curve along ``tangent x normal`` (outwards
    for a closed curve, whose normal follows its winding), negative distances
    the other way. Offsets of one sign are applied incrementally on the same
    working curve, so a loop pinched off at a small distance is not revisited
    at a larger one.

    Args:
        curve: Open or closed planar polyline
        offsets: Signed offset distances
        normal: Plane normal; derived from the curve when omitted
        options: Behaviour toggles, defaults to :class:`OffsetOptions`
        only_largest_per_step: When the curve splits, keep only the largest
            closed loop (or the open remainder of an open curve)
        distance_tolerance: Distance tolerance
        angle_tolerance: Angle below which adjacent segments count as folded

    Returns:
        Offset polylines: the curve itself for a zero offset, then the
        results of the positive offsets in ascending order, then those of the
        negative offsets by ascending magnitude. Empty for a degenerate curve
        or no offsets. None when an open curve spans no plane and no normal
        is given.

    Raises:
        ValidationError: If the curve is not planar

    Examples:
        >>> square = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> [round(area(c), 6) for c in multi_offset(square, [0.1, -0.1])]
        [1.44, 0.64]
    """
    if curve.length <= distance_tolerance or len(offsets) == 0:
        return []
    if len(offsets) == 1 and offsets[0] == 0:
        return [curve.copy()]
    if not is_planar(curve, distance_tolerance):
        raise ValidationError("Offset works only on planar curves", curve)

    options = options if options is not None else OffsetOptions()
    closed = curve.is_closed(distance_tolerance)

    plane_normal = _offset_normal(curve, closed, normal, distance_tolerance)
    if plane_normal is None or not plane_normal.any():
        warnings.warn(
            "An open curve without a spanned plane needs an explicit normal to be offset",
            NonCombinableWarning,
            stacklevel=2,
        )
        return None

    vertices, segments = _build_records(curve, closed, plane_normal, options, distance_tolerance)
    if vertices is None:
        return []

    result = [curve.copy()] if any(d == 0 for d in offsets) else []

    positive = _increments([d for d in offsets if d > 0])
    negative = _increments([-d for d in offsets if d < 0])

    negative_vertices = [v.copy() for v in vertices]
    negative_segments = [s.copy(flip_orthogonal=True) for s in segments]

    run = OffsetRun(plane_normal, closed, options, only_largest_per_step,
                    distance_tolerance, angle_tolerance)
    loops = _iterate(vertices, segments, positive, run, True)
    loops += _iterate(negative_vertices, negative_segments, negative,
                      replace(run, normal=-plane_normal), True)

    for loop in loops:
        if len(loop.points) < 2:
            continue
        points = np.vstack([loop.points, loop.points[:1]]) if loop.closed else loop.points
        offset = Polyline(points)
        if offset.length > distance_tolerance:
            result.append(offset)
    return result


def offset_curve(
    curve: Polyline,
    offset: float,
    normal=None,
    options: Optional[OffsetOptions] = None,
    distance_tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> Optional[List[Polyline]]:
    """Offset ``curve`` by a single signed distance. See :func:`multi_offset`."""
    return multi_offset(curve, [offset], normal, options,
                        distance_tolerance=distance_tolerance, angle_tolerance=angle_tolerance)


__all__ = [
    'multi_offset',
    'offset_curve',
]
