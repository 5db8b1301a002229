"""Type definitions for planeforge operations.

This module defines the enums used to tag geometry kinds and operation
variants throughout the library.
"""

from enum import Enum
from typing import Type, TypeVar, Union


class BooleanOperation(Enum):
    """Set operation applied by the Boolean engine.

    Attributes:
        UNION: Keep everything covered by either operand
        INTERSECTION: Keep only what both operands cover
        DIFFERENCE: Keep what the first operand covers and the second does not

    Examples:
        >>> BooleanOperation('difference').name
        'DIFFERENCE'
    """
    UNION = 'union'
    INTERSECTION = 'intersection'
    DIFFERENCE = 'difference'


class GeometryKind(Enum):
    """Kind of operand accepted by the Boolean engine.

    Attributes:
        LINE: A single straight segment
        LINES: A list of straight segments
        REGION: A single closed polyline
        REGIONS: A list of closed polylines
    """
    LINE = 'line'
    LINES = 'lines'
    REGION = 'region'
    REGIONS = 'regions'


class CornerType(Enum):
    """Classification of a corner whose adjacent segments fold back on each other.

    Attributes:
        OUTWARD: The spike points away from the offset direction; a miter
            segment is inserted
        INWARD: The spike points into the offset direction; the corner vertex
            is removed
    """
    OUTWARD = 'outward'
    INWARD = 'inward'


E = TypeVar('E', bound=Enum)


def coerce_enum(value: Union[str, Enum], enum_type: Type[E]) -> E:
    """Convert a string or enum member into a member of ``enum_type``.

    Args:
        value: Enum member, or the member's value or name (case-insensitive)
        enum_type: Target enum class

    Returns:
        Matching member of ``enum_type``

    Raises:
        ValueError: If ``value`` does not name a member of ``enum_type``

    Examples:
        >>> coerce_enum('union', BooleanOperation)
        <BooleanOperation.UNION: 'union'>
    """
    if isinstance(value, enum_type):
        return value
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        lowered = value.lower()
        for member in enum_type:
            if member.value == lowered or member.name.lower() == lowered:
                return member
    valid = ', '.join(member.value for member in enum_type)
    raise ValueError(f"Unknown {enum_type.__name__}: {value!r}. Expected one of: {valid}")


__all__ = [
    'BooleanOperation',
    'GeometryKind',
    'CornerType',
    'coerce_enum',
]
