"""Default tolerances shared by planeforge operations."""

from typing import Optional

DISTANCE_TOLERANCE = 1e-6
ANGLE_TOLERANCE = 1e-6

# Secondary epsilons in boundary predicates are this fraction of the distance tolerance
BOUNDARY_RATIO = 1e-3


def boundary_tolerance(distance_tolerance: float, boundary: Optional[float] = None) -> float:
    """Return ``boundary`` if given, otherwise an epsilon derived from ``distance_tolerance``."""
    if boundary is not None:
        return boundary
    return distance_tolerance * BOUNDARY_RATIO


__all__ = [
    'DISTANCE_TOLERANCE',
    'ANGLE_TOLERANCE',
    'BOUNDARY_RATIO',
    'boundary_tolerance',
]
