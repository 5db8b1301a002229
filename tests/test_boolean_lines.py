"""Tests for Boolean operations on lines."""

import numpy as np
import pytest

from planeforge.boolean import (
    union_line,
    union_lines,
    intersect_line,
    intersect_line_with_lines,
    intersect_lines,
    subtract_line,
    subtract_lines,
)
from planeforge.core import Line


def endpoints(line):
    """Endpoints as a sorted list of tuples, independent of direction."""
    return sorted(tuple(np.round(p, 9)) for p in (line.start, line.end))


class TestUnionLine:
    """Tests for union_line function."""

    def test_overlapping(self):
        result = union_line(Line((0, 0), (2, 0)), Line((1, 0), (3, 0)))

        assert len(result) == 1
        assert endpoints(result[0]) == [(0.0, 0.0, 0.0), (3.0, 0.0, 0.0)]

    def test_touching_end_to_end(self):
        result = union_line(Line((0, 0), (1, 0)), Line((1, 0), (2, 0)))
        assert len(result) == 1
        assert result[0].length == pytest.approx(2.0)

    def test_contained(self):
        result = union_line(Line((0, 0), (3, 0)), Line((1, 0), (2, 0)))
        assert len(result) == 1
        assert result[0].length == pytest.approx(3.0)

    def test_collinear_with_gap(self):
        """Test that collinear lines with a gap stay separate."""
        result = union_line(Line((0, 0), (1, 0)), Line((2, 0), (3, 0)))
        assert len(result) == 2

    def test_crossing(self):
        result = union_line(Line((0, 0), (2, 0)), Line((1, -1), (1, 1)))
        assert len(result) == 2

    def test_degenerate_input(self):
        result = union_line(Line((0, 0), (0, 0)), Line((1, 0), (2, 0)))
        assert len(result) == 1
        assert result[0].length == pytest.approx(1.0)

    def test_union_lines_merges_chain(self):
        lines = [Line((0, 0), (1, 0)), Line((3, 0), (2, 0)), Line((0.5, 0), (2.5, 0)), Line((0, 1), (1, 1))]
        result = union_lines(lines)

        assert len(result) == 2
        assert sorted(round(line.length, 9) for line in result) == [1.0, 3.0]


class TestIntersectLine:
    """Tests for intersect_line function."""

    def test_partial_overlap(self):
        result = intersect_line(Line((0, 0), (2, 0)), Line((1, 0), (3, 0)))
        assert endpoints(result) == [(1.0, 0.0, 0.0), (2.0, 0.0, 0.0)]

    def test_reference_inside(self):
        result = intersect_line(Line((0, 0), (3, 0)), Line((1, 0), (2, 0)))
        assert endpoints(result) == [(1.0, 0.0, 0.0), (2.0, 0.0, 0.0)]

    def test_line_inside_reference(self):
        result = intersect_line(Line((1, 0), (2, 0)), Line((0, 0), (3, 0)))
        assert result.length == pytest.approx(1.0)

    def test_disjoint_collinear(self):
        assert intersect_line(Line((0, 0), (1, 0)), Line((2, 0), (3, 0))) is None

    def test_not_collinear(self):
        assert intersect_line(Line((0, 0), (2, 0)), Line((1, -1), (1, 1))) is None

    def test_with_several_lines(self):
        result = intersect_line_with_lines(
            Line((0, 0), (10, 0)),
            [Line((1, 0), (2, 0)), Line((5, 0), (6, 0)), Line((0, 1), (10, 1))],
        )
        assert sorted(round(line.length, 9) for line in result) == [1.0, 1.0]

    def test_common_overlap_of_all(self):
        result = intersect_lines([Line((0, 0), (4, 0)), Line((1, 0), (5, 0)), Line((2, 0), (6, 0))])
        assert endpoints(result) == [(2.0, 0.0, 0.0), (4.0, 0.0, 0.0)]

    def test_no_common_overlap(self):
        assert intersect_lines([Line((0, 0), (1, 0)), Line((0.5, 0), (2, 0)), Line((1.5, 0), (3, 0))]) is None


class TestSubtractLine:
    """Tests for subtract_line function."""

    def test_hole_in_middle(self):
        result = subtract_line(Line((0, 0), (3, 0)), Line((1, 0), (2, 0)))

        assert len(result) == 2
        assert [round(line.length, 9) for line in result] == [1.0, 1.0]

    def test_overlap_at_end(self):
        result = subtract_line(Line((0, 0), (2, 0)), Line((1, 0), (3, 0)))

        assert len(result) == 1
        assert endpoints(result[0]) == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)]

    def test_fully_covered(self):
        assert subtract_line(Line((1, 0), (2, 0)), Line((0, 0), (3, 0))) == []

    def test_unrelated_reference(self):
        result = subtract_line(Line((0, 0), (1, 0)), Line((0, 1), (1, 1)))
        assert len(result) == 1
        assert result[0].length == pytest.approx(1.0)

    def test_subtract_lines(self):
        result = subtract_lines([Line((0, 0), (10, 0))], [Line((1, 0), (2, 0)), Line((5, 0), (6, 0))])
        assert sorted(round(line.length, 9) for line in result) == [1.0, 3.0, 4.0]
