"""Boolean algebra on straight lines and closed planar regions."""

from .lines import (
    union_line,
    union_lines,
    intersect_line,
    intersect_line_with_lines,
    intersect_lines,
    subtract_line,
    subtract_lines,
)
from .regions import (
    union_region,
    union_regions,
    intersect_region,
    intersect_regions,
    subtract_region,
    subtract_regions,
)
from .operations import (
    geometry_kind,
    boolean_operation,
    boolean_union,
    boolean_intersection,
    boolean_difference,
)

__all__ = [
    # Lines
    'union_line',
    'union_lines',
    'intersect_line',
    'intersect_line_with_lines',
    'intersect_lines',
    'subtract_line',
    'subtract_lines',

    # Regions
    'union_region',
    'union_regions',
    'intersect_region',
    'intersect_regions',
    'subtract_region',
    'subtract_regions',

    # Dispatch
    'geometry_kind',
    'boolean_operation',
    'boolean_union',
    'boolean_intersection',
    'boolean_difference',
]
