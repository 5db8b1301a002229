"""Polyline offsetting with handling of the self-intersections the offset creates."""

from .structures import OffsetOptions
from .engine import multi_offset, offset_curve
from .corners import classify_corner

__all__ = [
    'OffsetOptions',
    'multi_offset',
    'offset_curve',
    'classify_corner',
]
