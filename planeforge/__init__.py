"""Planeforge - Planar geometry kernel for lines and polylines.

This library provides Boolean operations on lines and closed regions,
polyline offsetting, reconstruction of closed outlines from unordered
segments and splitting of regions, all on planar geometry in 3D space.
"""


# Value types
from .core import (
    Line,
    Polyline,
    Plane,
    PlaneFrame,
)

# Primitive queries
from .core import (
    distance,
    square_distance,
    is_parallel,
    is_collinear,
    line_intersection,
    line_intersections,
    polyline_intersections,
    fit_plane,
    is_coplanar,
    polyline_normal,
    signed_area,
    area,
    is_clockwise,
    is_containing,
    PlanarRegion,
    split_at_points,
    join,
    to_shapely,
    from_shapely,
    as_polyline,
    as_line,
)

# Boolean operations
from .boolean import (
    union_line,
    union_lines,
    intersect_line,
    intersect_lines,
    subtract_line,
    subtract_lines,
    union_region,
    union_regions,
    intersect_region,
    intersect_regions,
    subtract_region,
    subtract_regions,
    boolean_operation,
    boolean_union,
    boolean_intersection,
    boolean_difference,
)

# Offsetting
from .offset import OffsetOptions, multi_offset, offset_curve

# Outline reconstruction
from .topology import OutlineRegion, reconstruct_outlines, reconstruct_regions

# Splitting
from .split import split

# Clustering
from .clustering import cluster, cluster_points, cull_duplicates

# Simplification and metrics
from .simplify import deduplicate_vertices, remove_collinear_vertices
from .metrics import measure_polyline, total_area

# Core types (enums)
from .core import (
    BooleanOperation,
    GeometryKind,
    CornerType,
)

# Tolerances
from .core import DISTANCE_TOLERANCE, ANGLE_TOLERANCE

# Core exceptions and warnings
from .core import (
    PlaneforgeError,
    ValidationError,
    ConfigurationError,
    PlaneforgeWarning,
    NonCombinableWarning,
    NonConvergenceWarning,
    PrecisionWarning,
    TopologyWarning,
)

__all__ = [

    # Value types
    'Line',
    'Polyline',
    'Plane',
    'PlaneFrame',

    # Primitive queries
    'distance',
    'square_distance',
    'is_parallel',
    'is_collinear',
    'line_intersection',
    'line_intersections',
    'polyline_intersections',
    'fit_plane',
    'is_coplanar',
    'polyline_normal',
    'signed_area',
    'area',
    'is_clockwise',
    'is_containing',
    'PlanarRegion',
    'split_at_points',
    'join',
    'to_shapely',
    'from_shapely',
    'as_polyline',
    'as_line',

    # Boolean operations
    'union_line',
    'union_lines',
    'intersect_line',
    'intersect_lines',
    'subtract_line',
    'subtract_lines',
    'union_region',
    'union_regions',
    'intersect_region',
    'intersect_regions',
    'subtract_region',
    'subtract_regions',
    'boolean_operation',
    'boolean_union',
    'boolean_intersection',
    'boolean_difference',

    # Offsetting
    'OffsetOptions',
    'multi_offset',
    'offset_curve',

    # Outline reconstruction
    'OutlineRegion',
    'reconstruct_outlines',
    'reconstruct_regions',

    # Splitting
    'split',

    # Clustering
    'cluster',
    'cluster_points',
    'cull_duplicates',

    # Simplification and metrics
    'deduplicate_vertices',
    'remove_collinear_vertices',
    'measure_polyline',
    'total_area',

    # Core types (enums)
    'BooleanOperation',
    'GeometryKind',
    'CornerType',

    # Tolerances
    'DISTANCE_TOLERANCE',
    'ANGLE_TOLERANCE',

    # Core exceptions and warnings
    'PlaneforgeError',
    'ValidationError',
    'ConfigurationError',
    'PlaneforgeWarning',
    'NonCombinableWarning',
    'NonConvergenceWarning',
    'PrecisionWarning',
    'TopologyWarning',
]
