"""Reconstruction of closed outlines from unordered line segments."""

from .graph import LineGraph, build_graph, clean_and_split, cluster_lines
from .tracing import HalfEdgeGraph, trace_faces, trace_outer_boundary
from .outlines import OutlineRegion, reconstruct_outlines, reconstruct_regions

__all__ = [
    'OutlineRegion',
    'reconstruct_outlines',
    'reconstruct_regions',
    'LineGraph',
    'build_graph',
    'clean_and_split',
    'cluster_lines',
    'HalfEdgeGraph',
    'trace_outer_boundary',
    'trace_faces',
]
