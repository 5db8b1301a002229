"""Tests for splitting regions by cutting lines."""

import pytest

from planeforge import Line, Polyline, ValidationError, area, split, total_area


def square(size=2.0):
    return Polyline([(0, 0), (size, 0), (size, size), (0, size), (0, 0)])


class TestSplit:
    """Tests for split function."""

    def test_single_chord(self):
        """Test that a chord through a square gives two cells covering it."""
        cells = split(square(), [Line((1, -1), (1, 3))])

        assert len(cells) == 2
        assert total_area(cells) == pytest.approx(4.0)
        assert sorted(round(area(c), 9) for c in cells) == [2.0, 2.0]

    def test_two_crossing_chords(self):
        cells = split(square(), [Line((1, -1), (1, 3)), Line((-1, 1), (3, 1))])

        assert len(cells) == 4
        assert all(area(c) == pytest.approx(1.0) for c in cells)

    def test_chord_ending_on_boundary(self):
        cells = split(square(), [Line((0, 0), (2, 2))])

        assert len(cells) == 2
        assert total_area(cells) == pytest.approx(4.0)

    def test_no_cutting_lines(self):
        region = square()
        cells = split(region, [])

        assert len(cells) == 1
        assert cells[0] is not region
        assert area(cells[0]) == pytest.approx(4.0)

    def test_line_outside_region(self):
        cells = split(square(), [Line((5, -1), (5, 3))])

        assert len(cells) == 1
        assert area(cells[0]) == pytest.approx(4.0)

    def test_dangling_cut_is_ignored(self):
        """Test that a cut ending inside the region does not split it."""
        cells = split(square(), [Line((1, -1), (1, 1))])

        assert len(cells) == 1
        assert area(cells[0]) == pytest.approx(4.0)

    def test_cut_along_boundary(self):
        cells = split(square(), [Line((-1, 0), (3, 0))])
        assert len(cells) == 1

    def test_concave_region(self):
        l_shape = Polyline([(0, 0), (3, 0), (3, 1), (1, 1), (1, 3), (0, 3), (0, 0)])
        cells = split(l_shape, [Line((-1, 2), (4, 2))])

        assert len(cells) == 2
        assert total_area(cells) == pytest.approx(area(l_shape))

    def test_cutting_lines_as_point_pairs(self):
        cells = split(square(), [((1, -1), (1, 3))])
        assert len(cells) == 2

    def test_vertical_region(self):
        region = Polyline([(0, 0, 0), (2, 0, 0), (2, 0, 2), (0, 0, 2), (0, 0, 0)])
        cells = split(region, [Line((1, 0, -1), (1, 0, 3))])

        assert len(cells) == 2
        assert total_area(cells) == pytest.approx(4.0)


class TestSplitValidation:
    """Tests for region validation in split."""

    def test_open_region(self):
        with pytest.raises(ValidationError, match="closed"):
            split(Polyline([(0, 0), (1, 0), (1, 1)]), [])

    def test_self_intersecting_region(self):
        bowtie = Polyline([(0, 0), (1, 1), (1, 0), (0, 1), (0, 0)])
        with pytest.raises(ValidationError, match="self-intersecting"):
            split(bowtie, [])

    def test_non_planar_region(self):
        warped = Polyline([(0, 0, 0), (1, 0, 0), (1, 1, 1), (0, 1, 0), (0, 0, 0)])
        with pytest.raises(ValidationError, match="planar"):
            split(warped, [])
