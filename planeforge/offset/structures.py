"""Working records of the offset engine.

A curve is turned into two parallel lists: one :class:`OffsetVertex` per
control point and one :class:`OffsetSegment` per edge, segment ``k`` running
from vertex ``k`` to vertex ``k + 1`` (wrapping around for closed curves). The
records are mutated in place during one offset run and never outlive it.
"""

import math
from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from ..core.errors import ConfigurationError
from ..core.primitives import normalise


@dataclass
class OffsetOptions:
    """Behaviour toggles for :func:`planeforge.offset.multi_offset`.

    Attributes:
        remove_short_segments: Drop segments shorter than the distance
            tolerance before offsetting
        handle_adjacent_parallel_segments: Repair corners whose two segments
            fold back onto each other
        handle_local_self_intersections: Remove segments that shrink to zero
            length while offsetting
        handle_global_self_intersections: Split the curve into separate loops
            when a vertex runs into a non-adjacent segment. Turns on local
            handling, which it depends on.
        bailout: Maximum number of steps spent on a single requested offset

    Examples:
        >>> OffsetOptions(handle_global_self_intersections=False).handle_local_self_intersections
        True
    """
    remove_short_segments: bool = True
    handle_adjacent_parallel_segments: bool = True
    handle_local_self_intersections: bool = True
    handle_global_self_intersections: bool = True
    bailout: int = 10000

    def __post_init__(self):
        if self.handle_global_self_intersections:
            self.handle_local_self_intersections = True
        if self.bailout < 1:
            raise ConfigurationError(f"bailout must be at least 1, got {self.bailout}")


@dataclass(eq=False)
class OffsetSegment:
    """Edge of the curve being offset.

    Attributes:
        tangent: Unit direction from the start vertex to the end vertex
        orthogonal: Unit vector ``tangent x normal``; the edge moves along it
        length: Current length
        length_change: Change of length per unit of offset
        compute_length_change: ``length_change`` is stale
        recompute_length: ``length`` must be measured again from the vertex
            positions (set on edges cut by a loop split)
    """
    tangent: np.ndarray
    orthogonal: np.ndarray
    length: float
    length_change: float = 0.0
    compute_length_change: bool = True
    recompute_length: bool = False

    @classmethod
    def between(cls, start: np.ndarray, end: np.ndarray, normal: np.ndarray) -> 'OffsetSegment':
        diff = end - start
        length = float(np.linalg.norm(diff))
        tangent = diff / length if length > 0 else np.zeros(3)
        return cls(tangent, normalise(np.cross(tangent, normal)), length)

    def copy(self, flip_orthogonal: bool = False) -> 'OffsetSegment':
        return OffsetSegment(
            tangent=self.tangent.copy(),
            orthogonal=-self.orthogonal if flip_orthogonal else self.orthogonal.copy(),
            length=self.length,
            length_change=self.length_change,
            compute_length_change=self.compute_length_change,
            recompute_length=self.recompute_length,
        )


@dataclass(eq=False)
class OffsetVertex:
    """Control point of the curve being offset.

    ``translation`` is the displacement for a unit offset. Its length is the
    miter factor ``1 / cos(theta / 2)`` so that both adjacent edges move by
    exactly one unit along their orthogonals.

    Attributes:
        position: Current position
        translation: Displacement per unit of offset
        adjacent_length_change: Length gained by each adjacent edge per unit of
            offset through the motion of this vertex
        compute_translation: ``translation`` is stale
        compute_intersection: The collision forecast is stale
        any_segment_in_range: Some non-adjacent edge line lies ahead within the
            remaining offset (the forecast must be refreshed when edges change)
        offset_until_intersection: Offset left before this vertex strikes
            ``segment_intersected``
        segment_intersected: Index of the edge the vertex strikes first, or -1
    """
    position: np.ndarray
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    adjacent_length_change: float = 0.0
    compute_translation: bool = True
    compute_intersection: bool = False
    any_segment_in_range: bool = False
    offset_until_intersection: float = math.inf
    segment_intersected: int = -1

    def reset_collision(self) -> None:
        self.offset_until_intersection = math.inf
        self.segment_intersected = -1

    def copy(self) -> 'OffsetVertex':
        return OffsetVertex(
            position=self.position.copy(),
            translation=self.translation.copy(),
            adjacent_length_change=self.adjacent_length_change,
            compute_translation=self.compute_translation,
            compute_intersection=self.compute_intersection,
            any_segment_in_range=self.any_segment_in_range,
            offset_until_intersection=self.offset_until_intersection,
            segment_intersected=self.segment_intersected,
        )


@dataclass(frozen=True, eq=False)
class OffsetRun:
    """Settings shared by every step and every split loop of one offset side."""
    normal: np.ndarray
    closed: bool
    options: OffsetOptions
    only_largest: bool
    distance_tolerance: float
    angle_tolerance: float


class OffsetLoop(NamedTuple):
    """Snapshot of the vertex positions after a requested offset."""
    points: np.ndarray
    closed: bool


__all__ = [
    'OffsetOptions',
    'OffsetSegment',
    'OffsetVertex',
    'OffsetRun',
    'OffsetLoop',
]
