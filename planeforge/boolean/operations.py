"""Generic entry points of the Boolean engine.

Operands are tagged with a :class:`GeometryKind` and the pair of tags selects
a handler from a registry. Every handler returns a list of lines or regions.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..core.geometry import Line, Polyline
from ..core.tolerance import DISTANCE_TOLERANCE
from ..core.types import BooleanOperation, GeometryKind, coerce_enum
from .lines import (
    intersect_line,
    intersect_line_with_lines,
    intersect_lines,
    subtract_line,
    subtract_lines,
    union_line,
    union_lines,
)
from .regions import (
    intersect_region,
    intersect_regions,
    subtract_region,
    subtract_regions,
    union_region,
    union_regions,
)

Operand = Union[Line, Polyline, Sequence[Line], Sequence[Polyline]]
Handler = Callable[..., List]
HandlerKey = Tuple[BooleanOperation, GeometryKind, Optional[GeometryKind]]

OPERATION_REGISTRY: Dict[HandlerKey, Handler] = {}


def _register(operation: BooleanOperation, kind: GeometryKind, other: Optional[GeometryKind] = None):
    def decorator(func: Handler) -> Handler:
        OPERATION_REGISTRY[(operation, kind, other)] = func
        return func

    return decorator


def geometry_kind(value: Operand) -> GeometryKind:
    """Tag an operand with its :class:`GeometryKind`.

    Raises:
        TypeError: For anything other than a Line, a Polyline or a non-empty
            homogeneous sequence of either
    """
    if isinstance(value, Line):
        return GeometryKind.LINE
    if isinstance(value, Polyline):
        return GeometryKind.REGION

    items = list(value)
    if items and all(isinstance(item, Line) for item in items):
        return GeometryKind.LINES
    if items and all(isinstance(item, Polyline) for item in items):
        return GeometryKind.REGIONS
    raise TypeError("Boolean operands must be a Line, a Polyline or a non-empty list of one of them")


# ============================================================================
# Union handlers
# ============================================================================

@_register(BooleanOperation.UNION, GeometryKind.LINE, GeometryKind.LINE)
def _union_line_line(line, other, tolerance):
    return union_line(line, other, tolerance)


@_register(BooleanOperation.UNION, GeometryKind.LINE, GeometryKind.LINES)
def _union_line_lines(line, others, tolerance):
    return union_lines([line] + list(others), tolerance)


@_register(BooleanOperation.UNION, GeometryKind.LINES)
def _union_lines(lines, _, tolerance):
    return union_lines(lines, tolerance)


@_register(BooleanOperation.UNION, GeometryKind.REGION, GeometryKind.REGION)
def _union_region_region(region, other, tolerance):
    return union_region(region, other, tolerance)[1]


@_register(BooleanOperation.UNION, GeometryKind.REGION, GeometryKind.REGIONS)
def _union_region_regions(region, others, tolerance):
    return union_regions([region] + list(others), tolerance)


@_register(BooleanOperation.UNION, GeometryKind.REGIONS)
def _union_regions(regions, _, tolerance):
    return union_regions(regions, tolerance)


# ============================================================================
# Intersection handlers
# ============================================================================

@_register(BooleanOperation.INTERSECTION, GeometryKind.LINE, GeometryKind.LINE)
def _intersect_line_line(line, other, tolerance):
    overlap = intersect_line(line, other, tolerance)
    return [] if overlap is None else [overlap]


@_register(BooleanOperation.INTERSECTION, GeometryKind.LINE, GeometryKind.LINES)
def _intersect_line_lines(line, others, tolerance):
    return intersect_line_with_lines(line, others, tolerance)


@_register(BooleanOperation.INTERSECTION, GeometryKind.LINES)
def _intersect_lines(lines, _, tolerance):
    overlap = intersect_lines(list(lines), tolerance)
    return [] if overlap is None else [overlap]


@_register(BooleanOperation.INTERSECTION, GeometryKind.REGION, GeometryKind.REGION)
def _intersect_region_region(region, other, tolerance):
    return intersect_region(region, other, tolerance)


@_register(BooleanOperation.INTERSECTION, GeometryKind.REGION, GeometryKind.REGIONS)
def _intersect_region_regions(region, others, tolerance):
    return intersect_regions([region] + list(others), tolerance)


@_register(BooleanOperation.INTERSECTION, GeometryKind.REGIONS)
def _intersect_regions(regions, _, tolerance):
    return intersect_regions(list(regions), tolerance)


# ============================================================================
# Difference handlers
# ============================================================================

@_register(BooleanOperation.DIFFERENCE, GeometryKind.LINE, GeometryKind.LINE)
def _subtract_line_line(line, other, tolerance):
    return subtract_line(line, other, tolerance)


@_register(BooleanOperation.DIFFERENCE, GeometryKind.LINE, GeometryKind.LINES)
def _subtract_line_lines(line, others, tolerance):
    return subtract_lines([line], others, tolerance)


@_register(BooleanOperation.DIFFERENCE, GeometryKind.LINES, GeometryKind.LINES)
def _subtract_lines_lines(lines, others, tolerance):
    return subtract_lines(lines, others, tolerance)


@_register(BooleanOperation.DIFFERENCE, GeometryKind.LINES, GeometryKind.LINE)
def _subtract_lines_line(lines, other, tolerance):
    return subtract_lines(lines, [other], tolerance)


@_register(BooleanOperation.DIFFERENCE, GeometryKind.REGION, GeometryKind.REGION)
def _subtract_region_region(region, other, tolerance):
    regions, _ = subtract_region(region, other, tolerance)
    return regions


@_register(BooleanOperation.DIFFERENCE, GeometryKind.REGION, GeometryKind.REGIONS)
def _subtract_region_regions(region, others, tolerance):
    return subtract_regions([region], others, tolerance)


@_register(BooleanOperation.DIFFERENCE, GeometryKind.REGIONS, GeometryKind.REGIONS)
def _subtract_regions_regions(regions, others, tolerance):
    return subtract_regions(regions, others, tolerance)


@_register(BooleanOperation.DIFFERENCE, GeometryKind.REGIONS, GeometryKind.REGION)
def _subtract_regions_region(regions, other, tolerance):
    return subtract_regions(regions, [other], tolerance)


# ============================================================================
# Public API
# ============================================================================

def boolean_operation(
    operation: Union[BooleanOperation, str],
    geometry: Operand,
    other: Optional[Operand] = None,
    tolerance: float = DISTANCE_TOLERANCE
) -> List:
    """Apply a Boolean operation to lines or closed regions.

    Args:
        operation: BooleanOperation or its name ('union', 'intersection', 'difference')
        geometry: A Line, a closed Polyline, or a list of either
        other: Optional second operand of the same family
        tolerance: Distance tolerance

    Returns:
        List of resulting lines or regions

    Raises:
        TypeError: If the operand combination is not supported
        ValidationError: If a region operand is not closed

    Examples:
        >>> a = Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        >>> b = Polyline([(0.5, 0), (1.5, 0), (1.5, 1), (0.5, 1), (0.5, 0)])
        >>> len(boolean_operation('intersection', a, b))
        1
    """
    operation = coerce_enum(operation, BooleanOperation)

    if other is not None and not isinstance(other, (Line, Polyline)) and not list(other):
        # An empty second operand leaves the first one as it is
        other = None
        if operation == BooleanOperation.DIFFERENCE:
            return [item.copy() for item in ([geometry] if isinstance(geometry, (Line, Polyline)) else geometry)]

    if not isinstance(geometry, (Line, Polyline)) and not list(geometry):
        return []

    kind = geometry_kind(geometry)
    other_kind = geometry_kind(other) if other is not None else None
    handler = OPERATION_REGISTRY.get((operation, kind, other_kind))
    if handler is None:
        described = kind.value if other_kind is None else f"{kind.value} and {other_kind.value}"
        raise TypeError(f"{operation.value} is not defined for {described}")

    return handler(geometry, other, tolerance)


def boolean_union(geometry: Operand, other: Optional[Operand] = None,
                  tolerance: float = DISTANCE_TOLERANCE) -> List:
    """Union of lines or regions. See :func:`boolean_operation`."""
    return boolean_operation(BooleanOperation.UNION, geometry, other, tolerance)


def boolean_intersection(geometry: Operand, other: Optional[Operand] = None,
                         tolerance: float = DISTANCE_TOLERANCE) -> List:
    """Intersection of lines or regions. See :func:`boolean_operation`."""
    return boolean_operation(BooleanOperation.INTERSECTION, geometry, other, tolerance)


def boolean_difference(geometry: Operand, other: Operand,
                       tolerance: float = DISTANCE_TOLERANCE) -> List:
    """Difference of lines or regions. See :func:`boolean_operation`."""
    return boolean_operation(BooleanOperation.DIFFERENCE, geometry, other, tolerance)


__all__ = [
    'OPERATION_REGISTRY',
    'geometry_kind',
    'boolean_operation',
    'boolean_union',
    'boolean_intersection',
    'boolean_difference',
]
