"""Boundary and face tracing on a planar graph in local 2D coordinates.

Every edge is split into two half-edges, one per direction. Walking from a
half-edge and always taking the most-left turn at its head visits the face
lying on the left of the half-edge. The outer boundary is found first by such
a walk from the leftmost node, which keeps the unbounded face on its left;
every remaining half-edge then belongs to exactly one bounded face.
"""

import logging
import warnings
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.errors import TopologyWarning

logger = logging.getLogger(__name__)

HalfEdge = Tuple[int, bool]


def _most_left(heading: np.ndarray, candidates: Sequence[HalfEdge],
               direction: Dict[HalfEdge, np.ndarray]) -> HalfEdge:
    """Pick the candidate turning furthest to the left of ``heading``."""
    left = np.array([-heading[1], heading[0]])
    best_left, best_left_score = None, np.inf
    best_right, best_right_score = None, -np.inf
    for h in candidates:
        d = direction[h]
        along = float(np.dot(d, heading))
        if float(np.dot(left, d)) >= 0:
            if along < best_left_score:
                best_left, best_left_score = h, along
        elif along > best_right_score:
            best_right, best_right_score = h, along
    return best_left if best_left is not None else best_right


class HalfEdgeGraph:
    """Half-edge view of a planar graph.

    Args:
        coords: ``(N, 2)`` node coordinates in the plane
        edges: Node index pairs
    """

    def __init__(self, coords: np.ndarray, edges: Sequence[Tuple[int, int]]):
        self.coords = np.asarray(coords, dtype=float)
        self.edges = list(edges)
        self.outgoing: Dict[int, List[HalfEdge]] = {}
        self.direction: Dict[HalfEdge, np.ndarray] = {}

        for k, (u, v) in enumerate(self.edges):
            d = self.coords[v] - self.coords[u]
            d = d / np.linalg.norm(d)
            self.outgoing.setdefault(u, []).append((k, True))
            self.outgoing.setdefault(v, []).append((k, False))
            self.direction[(k, True)] = d
            self.direction[(k, False)] = -d

    def half_edges(self) -> List[HalfEdge]:
        return [(k, forward) for k in range(len(self.edges)) for forward in (True, False)]

    def tail(self, h: HalfEdge) -> int:
        u, v = self.edges[h[0]]
        return u if h[1] else v

    def head(self, h: HalfEdge) -> int:
        u, v = self.edges[h[0]]
        return v if h[1] else u

    @staticmethod
    def twin(h: HalfEdge) -> HalfEdge:
        return (h[0], not h[1])

    def next(self, h: HalfEdge) -> HalfEdge:
        """Most-left continuation of ``h``; turns back only at a dead end."""
        twin = self.twin(h)
        candidates = [c for c in self.outgoing[self.head(h)] if c != twin]
        if not candidates:
            return twin
        return _most_left(self.direction[h], candidates, self.direction)

    def cycle_area(self, cycle: Sequence[HalfEdge]) -> float:
        """Signed area of the node loop of ``cycle`` (positive when counter-clockwise)."""
        pts = self.coords[[self.tail(h) for h in cycle]]
        x, y = pts[:, 0], pts[:, 1]
        return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def trace_outer_boundary(graph: HalfEdgeGraph) -> Optional[List[HalfEdge]]:
    """Trace the boundary of the unbounded face, clockwise.

    The walk starts at the node with the smallest x (then y) on its most
    upward edge.

    Returns:
        Half-edges of the boundary, or None if the walk does not close
    """
    if not graph.outgoing:
        return None

    start = min(graph.outgoing, key=lambda n: (graph.coords[n][0], graph.coords[n][1]))
    first = max(graph.outgoing[start], key=lambda h: graph.direction[h][1])

    boundary = [first]
    current = first
    for _ in range(2 * len(graph.edges)):
        current = graph.next(current)
        if current == first:
            return boundary
        boundary.append(current)

    logger.debug("Outer boundary walk did not return to its start")
    return None


def trace_faces(graph: HalfEdgeGraph, outer: Sequence[HalfEdge], tolerance: float) -> List[List[int]]:
    """Trace every bounded face as a counter-clockwise node loop.

    Half-edges on ``outer`` are skipped. A walk that runs into a half-edge
    already used by another face means the embedding is inconsistent; that
    face is dropped with a :class:`TopologyWarning`. Loops with an area not
    above ``tolerance ** 2`` are dropped silently.
    """
    used = set(outer)
    faces: List[List[int]] = []

    for start in graph.half_edges():
        if start in used:
            continue

        cycle = [start]
        used.add(start)
        current = graph.next(start)
        consistent = True
        while current != start:
            if current in used or len(cycle) > len(graph.edges) * 2:
                consistent = False
                break
            cycle.append(current)
            used.add(current)
            current = graph.next(current)

        if not consistent:
            warnings.warn(
                "Face tracing met an already traced edge; face skipped",
                TopologyWarning,
                stacklevel=3
            )
            continue
        if graph.cycle_area(cycle) <= tolerance * tolerance:
            continue
        faces.append([graph.tail(h) for h in cycle])

    logger.debug("Traced %d face(s)", len(faces))
    return faces


__all__ = [
    'HalfEdge',
    'HalfEdgeGraph',
    'trace_outer_boundary',
    'trace_faces',
]
