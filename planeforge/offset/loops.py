"""Splitting an offset curve into separate loops at vertex/segment collisions.

When vertex ``a`` lands on segment ``b`` the curve pinches off at that point.
For a closed curve this gives two loops: ``a .. b`` closed by the part of
``b`` ending at ``a``, and ``a, b + 1 .. a - 1`` opened by the part of ``b``
starting at ``a``. An open curve gives one closed loop and an open remainder.

Collisions are applied one at a time to a growing list of chains. A vertex
that struck earlier belongs to several chains and a struck segment may have
been cut already, so each collision is resolved against the chain whose copy
of the segment actually runs under the vertex.
"""

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..core.primitives import distance, point_segment_square_distance
from .structures import OffsetRun, OffsetSegment, OffsetVertex

logger = logging.getLogger(__name__)


class Chain(NamedTuple):
    vertices: List[OffsetVertex]
    segments: List[OffsetSegment]
    closed: bool


def _cyclic(items: Sequence, start: int, stop: int) -> list:
    """Items from ``start`` to ``stop`` inclusive, wrapping around the end."""
    result = []
    k = start
    while True:
        result.append(items[k])
        if k == stop:
            return result
        k = (k + 1) % len(items)


def _index_of(items: Sequence, item) -> int:
    for k, candidate in enumerate(items):
        if candidate is item:
            return k
    return -1


def _locate(chains: List[Chain], vertex: OffsetVertex, segment: OffsetSegment) -> Optional[Tuple[int, int, int]]:
    """Return (chain index, vertex index, segment index) of the best match, or None."""
    best = None
    best_distance = np.inf
    for c, chain in enumerate(chains):
        a = _index_of(chain.vertices, vertex)
        b = _index_of(chain.segments, segment)
        if a == -1 or b == -1:
            continue

        count = len(chain.segments)
        if b == a or (chain.closed and b == (a - 1) % count) or (not chain.closed and b == a - 1):
            continue

        start = chain.vertices[b].position
        end = chain.vertices[(b + 1) % len(chain.vertices)].position
        gap = point_segment_square_distance(vertex.position, start, end)
        if gap < best_distance:
            best, best_distance = (c, a, b), gap
    return best


def _split_chain(chain: Chain, a: int, b: int) -> List[Chain]:
    verts, segs = chain.vertices, chain.segments

    if chain.closed:
        count = len(verts)
        first = Chain(_cyclic(verts, a, b), _cyclic(segs, a, b), True)
        second = Chain(
            [verts[a]] + _cyclic(verts, (b + 1) % count, (a - 1) % count),
            _cyclic(segs, b, (a - 1) % count),
            True,
        )
        return [first, second]

    if b > a:
        loop = Chain(verts[a:b + 1], segs[a:b + 1], True)
        remainder = Chain(verts[:a + 1] + verts[b + 1:], segs[:a] + segs[b:], False)
    else:
        loop = Chain([verts[a]] + verts[b + 1:a], segs[b:a], True)
        remainder = Chain(verts[:b + 1] + verts[a:], segs[:b + 1] + segs[a:], False)
    return [remainder, loop]


def loop_area(vertices: Sequence[OffsetVertex], normal: np.ndarray) -> float:
    """Unsigned area enclosed by the vertex positions, measured about ``normal``."""
    if len(vertices) < 3:
        return 0.0
    pts = np.array([v.position for v in vertices])
    centered = pts - pts.mean(axis=0)
    total = np.cross(centered, np.roll(centered, -1, axis=0)).sum(axis=0)
    return abs(0.5 * float(np.dot(total, normal)))


def _drop_coincident(vertices: List[OffsetVertex], segments: List[OffsetSegment], closed: bool,
                     tolerance: float) -> None:
    """Merge vertices that a split left on top of their successor."""
    k = 0
    while len(vertices) > 2 and k < len(segments):
        following = (k + 1) % len(vertices)
        if distance(vertices[k].position, vertices[following].position) >= tolerance:
            k += 1
            continue
        # Segment k has no length; its end vertex takes over from vertex k
        del vertices[k]
        del segments[k]
        vertices[k % len(vertices)].compute_translation = True
        vertices[k - 1].compute_translation = True


def _rebuild(chain: Chain, run: OffsetRun) -> Chain:
    """Fresh records for ``chain`` with cut segments re-measured and collision forecasts reset."""
    vertices = [v.copy() for v in chain.vertices]
    segments = [s.copy() for s in chain.segments]
    _drop_coincident(vertices, segments, chain.closed, run.distance_tolerance)

    count = len(vertices)
    for k, segment in enumerate(segments):
        if segment.recompute_length:
            segment.length = distance(vertices[k].position, vertices[(k + 1) % count].position)
            segment.recompute_length = False
            segment.compute_length_change = True

    for vertex in vertices:
        vertex.reset_collision()
        vertex.any_segment_in_range = False
        vertex.compute_intersection = run.options.handle_global_self_intersections

    return Chain(vertices, segments, chain.closed)


def split_into_loops(
    vertices: List[OffsetVertex],
    segments: List[OffsetSegment],
    collisions: List[Tuple[OffsetVertex, OffsetSegment]],
    run: OffsetRun
) -> List[Chain]:
    """Split the working curve at ``collisions`` and return the surviving chains.

    Coincident vertices left by a cut are merged. Closed loops with two
    vertices or fewer, or enclosing no area, are dropped. With
    ``run.only_largest`` a closed curve keeps only its largest loop and an
    open curve keeps only its open remainder.
    """
    chains = [Chain(list(vertices), list(segments), run.closed)]
    for vertex, segment in collisions:
        found = _locate(chains, vertex, segment)
        if found is None:
            logger.debug("Collision could not be matched to a loop; skipped")
            continue
        c, a, b = found
        chains[c:c + 1] = _split_chain(chains[c], a, b)

    rebuilt = [_rebuild(chain, run) for chain in chains]
    survivors = [
        chain for chain in rebuilt
        if (not chain.closed and len(chain.vertices) >= 2)
        or (len(chain.vertices) > 2 and loop_area(chain.vertices, run.normal) > run.distance_tolerance ** 2)
    ]
    logger.debug("Offset curve split into %d loop(s) at %d collision(s)", len(survivors), len(collisions))

    if run.only_largest and survivors:
        remainders = [chain for chain in survivors if not chain.closed]
        if not run.closed and remainders:
            survivors = remainders[:1]
        else:
            survivors = [max(survivors, key=lambda chain: loop_area(chain.vertices, run.normal))]

    return survivors


__all__ = [
    'Chain',
    'loop_area',
    'split_into_loops',
]
