"""Tests for the primitive geometric queries."""

import numpy as np
import pytest

from planeforge.core import (
    Line,
    Polyline,
    PlanarRegion,
    distance,
    is_parallel,
    is_collinear,
    sort_collinear,
    line_intersection,
    line_intersections,
    polyline_intersections,
    fit_plane,
    is_coplanar,
    polyline_normal,
    signed_area,
    area,
    is_clockwise,
    is_containing,
)
from planeforge.core.geometry import as_point
from planeforge.core.primitives import point_segment_square_distance


def unit_square():
    return Polyline([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])


class TestValueTypes:
    """Tests for Line and Polyline."""

    def test_2d_points_are_padded(self):
        """Test that 2D input gets a zero z coordinate."""
        np.testing.assert_array_equal(as_point((1, 2)), [1.0, 2.0, 0.0])

    def test_line_length_and_direction(self):
        line = Line((0, 0), (3, 4))
        assert line.length == pytest.approx(5.0)
        np.testing.assert_array_almost_equal(line.direction, [0.6, 0.8, 0.0])

    def test_degenerate_line(self):
        assert Line((0, 0), (1e-9, 0)).is_degenerate()
        assert not Line((0, 0), (1, 0)).is_degenerate()

    def test_polyline_closed(self):
        assert unit_square().is_closed()
        assert not Polyline([(0, 0), (1, 0), (1, 1)]).is_closed()

    def test_polyline_segments(self):
        segments = unit_square().segments()
        assert len(segments) == 4
        assert sum(s.length for s in segments) == pytest.approx(4.0)

    def test_flip_reverses_points(self):
        curve = Polyline([(0, 0), (1, 0), (1, 1)])
        np.testing.assert_array_equal(curve.flip().points[0], [1.0, 1.0, 0.0])


class TestDistances:
    """Tests for point distance queries."""

    def test_distance(self):
        assert distance((0, 0, 0), (1, 2, 2)) == pytest.approx(3.0)

    def test_point_beyond_segment_end(self):
        """Test that the finite segment clamps to its end point."""
        sq = point_segment_square_distance(as_point((3, 1)), as_point((0, 0)), as_point((2, 0)))
        assert sq == pytest.approx(2.0)

    def test_point_beyond_infinite_line(self):
        sq = point_segment_square_distance(as_point((3, 1)), as_point((0, 0)), as_point((2, 0)), infinite=True)
        assert sq == pytest.approx(1.0)


class TestDirections:
    """Tests for parallelism and collinearity."""

    def test_parallel(self):
        assert is_parallel((1, 0, 0), (2, 0, 0)) == 1

    def test_anti_parallel(self):
        assert is_parallel((1, 0, 0), (-1, 0, 0)) == -1

    def test_not_parallel(self):
        assert is_parallel((1, 0, 0), (1, 1, 0)) == 0

    def test_zero_vector_never_parallel(self):
        assert is_parallel((0, 0, 0), (1, 0, 0)) == 0

    def test_collinear_lines(self):
        assert is_collinear(Line((0, 0), (1, 0)), Line((2, 0), (3, 0)))
        assert not is_collinear(Line((0, 0), (1, 0)), Line((0, 1), (1, 1)))

    def test_sort_collinear(self):
        ordered = sort_collinear([(2, 0), (0, 0), (1, 0), (3, 0)])
        assert [p[0] for p in ordered] == [0.0, 1.0, 2.0, 3.0] or [p[0] for p in ordered] == [3.0, 2.0, 1.0, 0.0]


class TestIntersections:
    """Tests for line and polyline intersection."""

    def test_crossing_segments(self):
        point = line_intersection(Line((0, 0), (2, 0)), Line((1, -1), (1, 1)))
        np.testing.assert_array_almost_equal(point, [1.0, 0.0, 0.0])

    def test_segments_missing_each_other(self):
        assert line_intersection(Line((0, 0), (1, 0)), Line((2, -1), (2, 1))) is None

    def test_infinite_lines_meet_beyond_segments(self):
        point = line_intersection(Line((0, 0), (1, 0)), Line((2, -1), (2, 1)), infinite=True)
        np.testing.assert_array_almost_equal(point, [2.0, 0.0, 0.0])

    def test_parallel_lines(self):
        assert line_intersection(Line((0, 0), (1, 0)), Line((0, 1), (1, 1))) is None

    def test_skew_lines(self):
        """Test that lines passing at different heights do not intersect."""
        assert line_intersection(Line((0, 0, 0), (2, 0, 0)), Line((1, -1, 1), (1, 1, 1))) is None

    def test_touching_at_endpoint(self):
        point = line_intersection(Line((0, 0), (1, 0)), Line((1, 0), (1, 1)))
        np.testing.assert_array_almost_equal(point, [1.0, 0.0, 0.0])

    def test_line_intersections_of_grid(self):
        lines = [
            Line((0, 0), (3, 0)), Line((0, 1), (3, 1)),
            Line((1, -1), (1, 2)), Line((2, -1), (2, 2)),
        ]
        assert len(line_intersections(lines)) == 4

    def test_polyline_intersections(self):
        a = unit_square()
        b = Polyline([(0.5, -1), (0.5, 2)])
        points = polyline_intersections(a, b)
        assert len(points) == 2


class TestPlanes:
    """Tests for plane fitting and orientation."""

    def test_fit_plane_of_square(self):
        plane = fit_plane(unit_square().points)
        assert abs(plane.normal[2]) == pytest.approx(1.0)

    def test_fit_plane_of_collinear_points(self):
        assert fit_plane([(0, 0), (1, 0), (2, 0)]) is None

    def test_coplanar(self):
        assert is_coplanar([(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 0)])
        assert not is_coplanar([(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 1, 1)])

    def test_polyline_normal_follows_winding(self):
        np.testing.assert_array_almost_equal(polyline_normal(unit_square()), [0, 0, 1])
        np.testing.assert_array_almost_equal(polyline_normal(unit_square().flip()), [0, 0, -1])

    def test_area(self):
        assert area(unit_square()) == pytest.approx(1.0)

    def test_area_in_vertical_plane(self):
        square = Polyline([(0, 0, 0), (2, 0, 0), (2, 0, 2), (0, 0, 2), (0, 0, 0)])
        assert area(square) == pytest.approx(4.0)

    def test_signed_area_and_clockwise(self):
        up = np.array([0.0, 0.0, 1.0])
        assert signed_area(unit_square(), up) == pytest.approx(1.0)
        assert signed_area(unit_square().flip(), up) == pytest.approx(-1.0)
        assert is_clockwise(unit_square().flip(), up)
        assert not is_clockwise(unit_square(), up)


class TestContainment:
    """Tests for point-in-region queries."""

    def test_inside(self):
        assert is_containing(unit_square(), [(0.5, 0.5)])

    def test_outside(self):
        assert not is_containing(unit_square(), [(1.5, 0.5)])

    def test_boundary(self):
        assert is_containing(unit_square(), [(1, 0.5)])
        assert not is_containing(unit_square(), [(1, 0.5)], include_boundary=False)

    def test_off_plane_point(self):
        assert not is_containing(unit_square(), [(0.5, 0.5, 1)])

    def test_prepared_region(self):
        region = PlanarRegion(unit_square())
        assert region.contains([(0.25, 0.25), (0.75, 0.75)])
        assert region.on_boundary((0, 0.5))
        assert region.boundary_distance((0.5, 0.5)) == pytest.approx(0.5)
