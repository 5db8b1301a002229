"""Planar line graphs built from an unordered soup of segments.

Segments are merged where collinear, split at every mutual intersection and
grouped into connected clusters. Each cluster becomes a :class:`LineGraph`
whose nodes are the snapped segment endpoints.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..boolean.lines import union_lines
from ..clustering import cluster, cluster_point_indices, cull_duplicates
from ..core.geometry import Line
from ..core.geometry_utils import split_line_at_points
from ..core.primitives import line_intersections, square_distance
from ..core.tolerance import ANGLE_TOLERANCE, DISTANCE_TOLERANCE

logger = logging.getLogger(__name__)


# ============================================================================
# Segment cleanup
# ============================================================================

def _same_line(line: Line, other: Line, sq_tol: float) -> bool:
    if square_distance(line.start, other.start) <= sq_tol and square_distance(line.end, other.end) <= sq_tol:
        return True
    return square_distance(line.start, other.end) <= sq_tol and square_distance(line.end, other.start) <= sq_tol


def clean_and_split(
    lines: Sequence[Line],
    tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> List[Line]:
    """Merge overlapping collinear lines and split them at every crossing.

    Pieces shorter than ``tolerance`` and duplicates (in either direction)
    are dropped.

    Examples:
        >>> pieces = clean_and_split([Line((0, 0), (2, 0)), Line((1, -1), (1, 1))])
        >>> len(pieces)
        4
    """
    merged = union_lines(lines, tolerance)
    points = line_intersections(merged, tolerance, angle_tolerance)
    if points:
        points = cull_duplicates(points, tolerance)

    sq_tol = tolerance * tolerance
    pieces: List[Line] = []
    for line in merged:
        for piece in split_line_at_points(line, points, tolerance):
            if piece.square_length <= sq_tol:
                continue
            if any(_same_line(piece, kept, sq_tol) for kept in pieces):
                continue
            pieces.append(piece)
    return pieces


def cluster_lines(lines: Sequence[Line], tolerance: float = DISTANCE_TOLERANCE) -> List[List[Line]]:
    """Group lines into connected components by shared endpoints."""
    sq_tol = tolerance * tolerance

    def touching(line: Line, other: Line) -> bool:
        return any(
            square_distance(p, q) <= sq_tol
            for p in (line.start, line.end)
            for q in (other.start, other.end)
        )

    return cluster(list(lines), adjacency=touching)


# ============================================================================
# Graph
# ============================================================================

@dataclass
class LineGraph:
    """Undirected graph of snapped segment endpoints.

    Attributes:
        nodes: ``(N, 3)`` node positions
        edges: Node index pairs, one per segment
    """
    nodes: np.ndarray
    edges: List[Tuple[int, int]]

    def incident(self) -> Dict[int, List[int]]:
        """Map every node with at least one edge to the indices of its edges."""
        result: Dict[int, List[int]] = {}
        for k, (u, v) in enumerate(self.edges):
            result.setdefault(u, []).append(k)
            result.setdefault(v, []).append(k)
        return result

    def used_nodes(self) -> List[int]:
        return sorted(self.incident())

    def prune(self) -> int:
        """Remove dangling edges until every node has valence two or more.

        Returns:
            Number of edges removed
        """
        removed = 0
        while True:
            incident = self.incident()
            dangling = {edges[0] for edges in incident.values() if len(edges) == 1}
            if not dangling:
                break
            self.edges = [edge for k, edge in enumerate(self.edges) if k not in dangling]
            removed += len(dangling)

        if removed:
            logger.info("Pruned %d dangling segment(s)", removed)
        return removed

    def lines(self) -> List[Line]:
        return [Line(self.nodes[u], self.nodes[v]) for u, v in self.edges]


def build_graph(lines: Sequence[Line], tolerance: float = DISTANCE_TOLERANCE) -> LineGraph:
    """Snap the endpoints of ``lines`` into nodes and connect them.

    Endpoints within ``tolerance`` of each other become one node at their mean
    position. Edges collapsing onto a single node and repeated edges are
    dropped.

    Examples:
        >>> graph = build_graph([Line((0, 0), (1, 0)), Line((1, 1e-9), (1, 1))])
        >>> len(graph.nodes), graph.edges
        (3, [(0, 1), (1, 2)])
    """
    endpoints = [p for line in lines for p in (line.start, line.end)]
    if not endpoints:
        return LineGraph(np.zeros((0, 3)), [])

    groups, _ = cluster_point_indices(endpoints, tolerance)
    node_of = np.empty(len(endpoints), dtype=int)
    nodes = np.zeros((len(groups), 3))
    for n, members in enumerate(groups):
        node_of[members] = n
        nodes[n] = np.mean([endpoints[i] for i in members], axis=0)

    edges: List[Tuple[int, int]] = []
    seen = set()
    for k in range(len(lines)):
        u, v = int(node_of[2 * k]), int(node_of[2 * k + 1])
        key = (min(u, v), max(u, v))
        if u == v or key in seen:
            continue
        seen.add(key)
        edges.append((u, v))

    return LineGraph(nodes, edges)


__all__ = [
    'clean_and_split',
    'cluster_lines',
    'LineGraph',
    'build_graph',
]
