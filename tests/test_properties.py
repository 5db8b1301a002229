"""Algebraic properties shared by the Boolean and offset operations."""

import numpy as np
import pytest

from planeforge import (
    Polyline,
    area,
    intersect_region,
    offset_curve,
    polyline_normal,
    signed_area,
    subtract_region,
    total_area,
    union_region,
    union_regions,
)


def rectangle(x0, y0, x1, y1):
    return Polyline([(x0, y0), (x1, y0), (x1, y1), (x0, y1), (x0, y0)])


PAIRS = [
    (rectangle(0, 0, 1, 1), rectangle(0.5, 0, 1.5, 1)),
    (rectangle(0, 0, 2, 2), rectangle(1, 1, 3, 3)),
    (
        Polyline([(0, 0), (3, 0), (3, 1), (1, 1), (1, 3), (0, 3), (0, 0)]),
        rectangle(0.5, 0.5, 2, 2),
    ),
]


class TestBooleanProperties:
    """Identities that hold for any pair of overlapping coplanar regions."""

    @pytest.mark.parametrize("a, b", PAIRS)
    def test_inclusion_exclusion(self, a, b):
        combined, union = union_region(a, b)

        assert combined
        expected = area(a) + area(b) - total_area(intersect_region(a, b))
        assert total_area(union) == pytest.approx(expected)

    @pytest.mark.parametrize("a, b", PAIRS)
    def test_intersection_is_symmetric(self, a, b):
        assert total_area(intersect_region(a, b)) == pytest.approx(total_area(intersect_region(b, a)))

    @pytest.mark.parametrize("a, b", PAIRS)
    def test_difference_adds_up(self, a, b):
        regions, _ = subtract_region(a, b)
        assert total_area(regions) + total_area(intersect_region(a, b)) == pytest.approx(area(a))

    def test_difference_with_itself_is_empty(self):
        square = rectangle(0, 0, 1, 1)
        regions, is_opening = subtract_region(square, square.copy())

        assert regions == []
        assert is_opening is False

    def test_union_with_itself(self):
        square = rectangle(0, 0, 1, 1)
        combined, regions = union_region(square, square.copy())

        assert combined
        assert len(regions) == 1
        assert area(regions[0]) == pytest.approx(1.0)

    def test_union_is_idempotent(self):
        squares = [rectangle(x, 0, x + 1, 1) for x in (0, 0.5, 1)] + [rectangle(5, 0, 6, 1)]
        once = union_regions(squares)
        twice = union_regions(once)

        assert len(once) == len(twice) == 2
        assert sorted(round(area(r), 9) for r in once) == sorted(round(area(r), 9) for r in twice)

    def test_union_with_opening_is_idempotent(self):
        """Test that a U closed by a bar keeps its opening through a second union."""
        u_shape = Polyline([(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3), (0, 0)])
        once = union_regions([u_shape, rectangle(0, 2, 3, 3)])
        twice = union_regions(once)

        assert [area(r) for r in once] == pytest.approx([9.0, 1.0])
        assert [area(r) for r in twice] == pytest.approx([9.0, 1.0])
        assert signed_area(once[1], polyline_normal(once[0])) < 0


class TestOffsetProperties:
    """Round trips through the offset engine."""

    @pytest.mark.parametrize("distance", [0.05, 0.1, 0.3])
    def test_round_trip(self, distance):
        square = rectangle(0, 0, 1, 1)
        grown = offset_curve(square, distance)
        restored = offset_curve(grown[0], -distance)

        assert len(restored) == 1
        assert area(restored[0]) == pytest.approx(1.0)
        for corner in square.points[:-1]:
            gaps = np.linalg.norm(restored[0].points - corner, axis=1)
            assert gaps.min() == pytest.approx(0.0, abs=1e-9)
