"""Core types and utilities for planeforge.

This module provides value types, enums, exceptions, tolerances and the
primitive geometric queries used throughout the library.
"""

from .types import (
    BooleanOperation,
    GeometryKind,
    CornerType,
    coerce_enum,
)

from .errors import (
    PlaneforgeError,
    ValidationError,
    ConfigurationError,
    PlaneforgeWarning,
    NonCombinableWarning,
    NonConvergenceWarning,
    PrecisionWarning,
    TopologyWarning,
)

from .tolerance import (
    DISTANCE_TOLERANCE,
    ANGLE_TOLERANCE,
    boundary_tolerance,
)

from .geometry import (
    Line,
    Polyline,
    Plane,
    PlaneFrame,
)

from .primitives import (
    distance,
    square_distance,
    cross,
    dot,
    normalise,
    is_parallel,
    is_collinear,
    sort_collinear,
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
)

from .geometry_utils import (
    split_at_points,
    join,
    to_shapely,
    from_shapely,
    as_polyline,
    as_line,
)

__all__ = [
    # Enums
    'BooleanOperation',
    'GeometryKind',
    'CornerType',
    'coerce_enum',

    # Exceptions and warnings
    'PlaneforgeError',
    'ValidationError',
    'ConfigurationError',
    'PlaneforgeWarning',
    'NonCombinableWarning',
    'NonConvergenceWarning',
    'PrecisionWarning',
    'TopologyWarning',

    # Tolerances
    'DISTANCE_TOLERANCE',
    'ANGLE_TOLERANCE',
    'boundary_tolerance',

    # Value types
    'Line',
    'Polyline',
    'Plane',
    'PlaneFrame',

    # Primitives
    'distance',
    'square_distance',
    'cross',
    'dot',
    'normalise',
    'is_parallel',
    'is_collinear',
    'sort_collinear',
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
]
