"""Tests for vertex clean-up."""

import numpy as np

from planeforge import Polyline, deduplicate_vertices, remove_collinear_vertices


class TestDeduplicateVertices:
    """Tests for deduplicate_vertices function."""

    def test_remove_exact_duplicates(self):
        curve = Polyline([(0, 0), (0, 0), (1, 1), (1, 1), (2, 2)])
        assert len(deduplicate_vertices(curve)) == 3

    def test_remove_duplicates_with_tolerance(self):
        curve = Polyline([(0, 0), (1e-12, 1e-12), (1, 1)])
        assert len(deduplicate_vertices(curve, tolerance=1e-10)) == 2

    def test_no_duplicates(self):
        curve = Polyline([(0, 0), (1, 1), (2, 2)])
        np.testing.assert_array_almost_equal(deduplicate_vertices(curve).points, curve.points)

    def test_closed_ring_is_kept_closed(self):
        curve = Polyline([(0, 0), (0, 0), (1, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
        result = deduplicate_vertices(curve)

        assert len(result) == 5
        np.testing.assert_array_equal(result.points[0], result.points[-1])


class TestRemoveCollinearVertices:
    """Tests for remove_collinear_vertices function."""

    def test_open_straight_run(self):
        curve = Polyline([(0, 0), (1, 0), (2, 0), (3, 0)])
        result = remove_collinear_vertices(curve)

        np.testing.assert_array_almost_equal(result.points, [[0, 0, 0], [3, 0, 0]])

    def test_open_corner_is_kept(self):
        curve = Polyline([(0, 0), (1, 0), (2, 0), (2, 1)])
        assert len(remove_collinear_vertices(curve)) == 3

    def test_closed_square_with_midpoints(self):
        curve = Polyline([(0, 0), (1, 0), (2, 0), (2, 2), (0, 2), (0, 1), (0, 0)])
        result = remove_collinear_vertices(curve)

        assert len(result) == 5
        assert result.is_closed()

    def test_collinear_seam(self):
        """Test that a seam lying in the middle of an edge is removed."""
        curve = Polyline([(1, 0), (2, 0), (2, 2), (0, 2), (0, 0), (1, 0)])
        result = remove_collinear_vertices(curve)

        assert len(result) == 5
        assert not any(np.allclose(p, [1, 0, 0]) for p in result.points)

    def test_tilted_plane(self):
        curve = Polyline([(0, 0, 0), (1, 0, 1), (2, 0, 2), (2, 1, 2), (0, 1, 0), (0, 0, 0)])
        assert len(remove_collinear_vertices(curve)) == 5

    def test_tolerance(self):
        curve = Polyline([(0, 0), (1, 0.01), (2, 0)])
        assert len(remove_collinear_vertices(curve, tolerance=0.1)) == 2
        assert len(remove_collinear_vertices(curve, tolerance=0.001)) == 3
