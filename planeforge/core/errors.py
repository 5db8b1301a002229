"""Exception and warning classes for planeforge.

Exceptions are raised only when a caller breaks a contract (an open curve
passed where a region is required, a non-planar curve passed to the offset
engine, bad arguments). Recoverable conditions are reported as warnings so
the operation can still return its best-effort result.
"""


class PlaneforgeError(Exception):
    """Base class for all planeforge exceptions."""


class ValidationError(PlaneforgeError):
    """Raised when input geometry violates the contract of an operation.

    Examples:
        >>> from planeforge import split, Polyline
        >>> bowtie = Polyline([(0, 0), (1, 1), (1, 0), (0, 1), (0, 0)])
        >>> split(bowtie, [])
        Traceback (most recent call last):
        ...
        ValidationError: Region must not be self-intersecting
    """

    def __init__(self, message: str, geometry=None):
        super().__init__(message)
        self.geometry = geometry


class ConfigurationError(PlaneforgeError, ValueError):
    """Raised when an operation is configured with incompatible parameters."""


class PlaneforgeWarning(UserWarning):
    """Base class for warnings emitted by planeforge operations."""


class NonCombinableWarning(PlaneforgeWarning):
    """Geometry could not be combined; the operation returned a failure signal."""


class NonConvergenceWarning(PlaneforgeWarning):
    """An iterative operation hit its iteration cap and returned a partial result."""


class PrecisionWarning(PlaneforgeWarning):
    """Input geometry was corrected (e.g. projected onto a fitted plane)."""


class TopologyWarning(PlaneforgeWarning):
    """Part of the input could not be turned into a consistent topology."""


__all__ = [
    'PlaneforgeError',
    'ValidationError',
    'ConfigurationError',
    'PlaneforgeWarning',
    'NonCombinableWarning',
    'NonConvergenceWarning',
    'PrecisionWarning',
    'TopologyWarning',
]
