"""Shared measurement helpers for planeforge geometries.

The Boolean and reconstruction code only needs a handful of scalar metrics
to sort and filter loops. Centralizing the logic here keeps the rest of the
codebase free from ad-hoc area and length checks.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Union

from .core.geometry import Polyline
from .core.primitives import area
from .core.tolerance import DISTANCE_TOLERANCE


def measure_polyline(
    curve: Polyline,
    original: Optional[Polyline] = None,
    tolerance: float = DISTANCE_TOLERANCE,
) -> Dict[str, Union[bool, int, float, None]]:
    """Return core metrics for ``curve``.

    ``area`` is ``None`` for open curves; ``area_ratio`` is only set when an
    ``original`` region with positive area is given.
    """
    closed = curve.is_closed(tolerance)
    curve_area = area(curve) if closed else None
    area_ratio: Optional[float] = None

    if curve_area is not None and original is not None and original.is_closed(tolerance):
        original_area = area(original)
        if original_area > 0:
            area_ratio = curve_area / original_area

    return {
        "is_closed": closed,
        "vertex_count": len(curve) - 1 if closed else len(curve),
        "length": curve.length,
        "area": curve_area,
        "area_ratio": area_ratio,
    }


def total_area(regions: Iterable[Polyline]) -> float:
    """Sum of the areas of the closed curves in ``regions``."""
    return sum(area(region) for region in regions if region.is_closed())


__all__ = [
    "measure_polyline",
    "total_area",
]
