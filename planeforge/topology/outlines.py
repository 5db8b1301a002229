"""Closed outlines reconstructed from unordered line segments.

Pipeline per call:

1. Merge collinear overlaps, split at crossings, drop short and repeated pieces
2. Group the pieces into connected clusters
3. Snap endpoints into graph nodes and prune dangling segments
4. Check each cluster is (nearly) coplanar and map it to a 2D frame
5. Trace the outer boundary, then every bounded face
"""

import logging
import warnings
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence

from ..core.errors import PrecisionWarning, TopologyWarning
from ..core.geometry import Polyline, PlaneFrame
from ..core.geometry_utils import as_line
from ..core.primitives import PlanarRegion, area, fit_plane, is_parallel, max_plane_deviation
from ..core.tolerance import ANGLE_TOLERANCE, DISTANCE_TOLERANCE, boundary_tolerance
from ..simplify import remove_collinear_vertices
from .graph import LineGraph, build_graph, clean_and_split, cluster_lines
from .tracing import HalfEdgeGraph, trace_faces, trace_outer_boundary

logger = logging.getLogger(__name__)


@dataclass
class OutlineRegion:
    """Closed boundary with the holes cut out of it.

    Attributes:
        boundary: Outer closed polyline
        holes: Closed polylines lying inside ``boundary``
    """
    boundary: Polyline
    holes: List[Polyline] = field(default_factory=list)

    @property
    def area(self) -> float:
        return area(self.boundary) - sum(area(hole) for hole in self.holes)


class _ClusterOutlines(NamedTuple):
    outer: Polyline
    faces: List[Polyline]


# ============================================================================
# Cluster preparation
# ============================================================================

def _frame(graph: LineGraph, angle_tolerance: float) -> Optional[PlaneFrame]:
    """2D frame spanned by the first edge and the first edge not parallel to it."""
    lines = graph.lines()
    x_direction = lines[0].direction
    for line in lines[1:]:
        if is_parallel(x_direction, line.direction, angle_tolerance) == 0:
            return PlaneFrame.from_axes(lines[0].start, x_direction, line.direction)
    return None


def _prepare(graph: LineGraph, tolerance: float) -> bool:
    """Check the cluster is coplanar, projecting it onto its plane if only nearly so."""
    used = graph.used_nodes()
    points = graph.nodes[used]
    plane = fit_plane(points, tolerance)
    if plane is None:
        warnings.warn("Collinear cluster encloses no area; skipped", TopologyWarning, stacklevel=4)
        return False

    deviation = max_plane_deviation(points, plane)
    if deviation > tolerance:
        warnings.warn(
            f"Cluster is not coplanar (deviation {deviation:.3g}); skipped",
            TopologyWarning,
            stacklevel=4
        )
        return False

    if deviation > boundary_tolerance(tolerance):
        warnings.warn(
            f"Cluster projected onto its fitted plane (deviation {deviation:.3g})",
            PrecisionWarning,
            stacklevel=4
        )
        graph.nodes[used] = plane.project(points)
    return True


def _to_polyline(graph: LineGraph, nodes: Sequence[int], tolerance: float) -> Polyline:
    loop = list(nodes) + [nodes[0]]
    return remove_collinear_vertices(Polyline(graph.nodes[loop]), tolerance)


def _trace_clusters(
    segments: Sequence,
    tolerance: float,
    angle_tolerance: float
) -> List[_ClusterOutlines]:
    lines = [as_line(s) for s in segments]
    pieces = clean_and_split(lines, tolerance, angle_tolerance)

    results = []
    for group in cluster_lines(pieces, tolerance):
        graph = build_graph(group, tolerance)
        graph.prune()
        if not graph.edges:
            continue
        if not _prepare(graph, tolerance):
            continue

        frame = _frame(graph, angle_tolerance)
        if frame is None:
            continue

        half_edges = HalfEdgeGraph(frame.to_local(graph.nodes), graph.edges)
        outer = trace_outer_boundary(half_edges)
        if outer is None:
            warnings.warn("Outer boundary of a cluster could not be traced; skipped", TopologyWarning, stacklevel=3)
            continue

        faces = trace_faces(half_edges, outer, tolerance)
        results.append(_ClusterOutlines(
            outer=_to_polyline(graph, [half_edges.tail(h) for h in outer], tolerance),
            faces=[_to_polyline(graph, face, tolerance) for face in faces],
        ))

    return results


# ============================================================================
# Public API
# ============================================================================

def reconstruct_outlines(
    segments: Sequence,
    tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> List[Polyline]:
    """Reconstruct every closed outline enclosed by a set of segments.

    Segments may be given in any order and direction, may overlap and may
    cross. Each bounded face of the resulting planar graph comes back as a
    closed polyline without collinear vertices. Segments that enclose nothing
    are ignored.

    Args:
        segments: Lines (or anything :func:`as_line` accepts)
        tolerance: Distance below which endpoints are merged
        angle_tolerance: Angle below which directions count as parallel

    Returns:
        Closed polylines, one per face

    Warns:
        TopologyWarning: A cluster is collinear, not coplanar or cannot be traced
        PrecisionWarning: A nearly coplanar cluster was projected onto its plane

    Examples:
        >>> sides = [Line((0, 0), (2, 0)), Line((2, 0), (2, 3)), Line((2, 3), (0, 3)), Line((0, 3), (0, 0))]
        >>> outlines = reconstruct_outlines(sides)
        >>> len(outlines), outlines[0].length
        (1, 10.0)
    """
    outlines: List[Polyline] = []
    for result in _trace_clusters(segments, tolerance, angle_tolerance):
        outlines.extend(result.faces)
    return outlines


def reconstruct_regions(
    segments: Sequence,
    tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> List[OutlineRegion]:
    """Reconstruct outlines and nest disjoint clusters into regions with holes.

    A cluster lying inside an odd number of other clusters is a hole: its
    outer boundary is assigned to the smallest face containing it. Faces of
    the remaining clusters are regions.

    Examples:
        >>> outer = [Line((0, 0), (4, 0)), Line((4, 0), (4, 4)), Line((4, 4), (0, 4)), Line((0, 4), (0, 0))]
        >>> inner = [Line((1, 1), (2, 1)), Line((2, 1), (2, 2)), Line((2, 2), (1, 2)), Line((1, 2), (1, 1))]
        >>> regions = reconstruct_regions(outer + inner)
        >>> len(regions), len(regions[0].holes), regions[0].area
        (1, 1, 15.0)
    """
    clusters = _trace_clusters(segments, tolerance, angle_tolerance)
    containers = [PlanarRegion(c.outer, tolerance) for c in clusters]

    depths = []
    for i, current in enumerate(clusters):
        points = current.outer.vertices(tolerance)
        depths.append(sum(
            1 for j, container in enumerate(containers)
            if j != i and container.contains(points)
        ))

    regions: List[OutlineRegion] = []
    for depth, current in zip(depths, clusters):
        if depth % 2 == 0:
            regions.extend(OutlineRegion(face) for face in current.faces)

    for depth, current in zip(depths, clusters):
        if depth % 2 == 0:
            continue
        points = current.outer.vertices(tolerance)
        owners = [
            region for region in regions
            if PlanarRegion(region.boundary, tolerance).contains(points)
        ]
        if not owners:
            logger.debug("Hole without a containing face kept as a region")
            regions.append(OutlineRegion(current.outer))
            continue
        owner = min(owners, key=lambda region: area(region.boundary))
        owner.holes.append(current.outer)

    return regions


__all__ = [
    'OutlineRegion',
    'reconstruct_outlines',
    'reconstruct_regions',
]
