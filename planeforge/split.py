"""Splitting a closed region into cells along cutting lines."""

import logging
from typing import List, Sequence

from .core.geometry import Polyline
from .core.geometry_utils import as_line, as_polyline
from .core.primitives import PlanarRegion
from .core.tolerance import ANGLE_TOLERANCE, DISTANCE_TOLERANCE
from .core.validation_utils import validate_split_region
from .topology.graph import clean_and_split
from .topology.outlines import reconstruct_outlines

logger = logging.getLogger(__name__)


def split(
    outer_region,
    cutting_lines: Sequence,
    tolerance: float = DISTANCE_TOLERANCE,
    angle_tolerance: float = ANGLE_TOLERANCE
) -> List[Polyline]:
    """Split a closed planar region into the cells cut out by lines.

    The region's edges and the cutting lines are split at their mutual
    intersections. Pieces outside the region are dropped, cuts that end
    inside the region without reaching another line are pruned, and the
    remaining graph is traced into closed cells.

    Args:
        outer_region: Closed, planar, simple polyline
        cutting_lines: Lines (or anything :func:`as_line` accepts); they may
            extend beyond the region
        tolerance: Distance tolerance
        angle_tolerance: Angle below which directions count as parallel

    Returns:
        Closed polylines covering the region; the region itself when no
        line cuts it

    Raises:
        ValidationError: If the region is open, non-planar or self-intersecting

    Examples:
        >>> square = Polyline([(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)])
        >>> cells = split(square, [((1, -1), (1, 3))])
        >>> len(cells)
        2
    """
    region = as_polyline(outer_region)
    validate_split_region(region, tolerance)

    cutters = [as_line(line) for line in cutting_lines]
    cutters = [line for line in cutters if not line.is_degenerate(tolerance)]
    if not cutters:
        return [region.copy()]

    container = PlanarRegion(region, tolerance)
    pieces = clean_and_split(region.segments() + cutters, tolerance, angle_tolerance)
    inside = [piece for piece in pieces if container.contains_point(piece.midpoint)]

    cells = reconstruct_outlines(inside, tolerance, angle_tolerance)
    logger.debug("Split region into %d cell(s) with %d cutting line(s)", len(cells), len(cutters))
    return cells


__all__ = ['split']
