"""Tests for outline reconstruction from unordered segments."""

import logging

import numpy as np
import pytest

from planeforge import (
    Line,
    PrecisionWarning,
    TopologyWarning,
    area,
    reconstruct_outlines,
    reconstruct_regions,
)
from planeforge.topology import HalfEdgeGraph, build_graph, clean_and_split, trace_faces, trace_outer_boundary


def rectangle_sides(x0, y0, x1, y1):
    return [
        Line((x0, y0), (x1, y0)),
        Line((x1, y0), (x1, y1)),
        Line((x1, y1), (x0, y1)),
        Line((x0, y1), (x0, y0)),
    ]


class TestReconstructOutlines:
    """Tests for reconstruct_outlines function."""

    def test_rectangle(self):
        """Test that four sides of a 2x3 rectangle give one outline."""
        outlines = reconstruct_outlines(rectangle_sides(0, 0, 2, 3))

        assert len(outlines) == 1
        assert outlines[0].is_closed()
        assert outlines[0].length == pytest.approx(10.0)
        assert area(outlines[0]) == pytest.approx(6.0)

    def test_shuffled_and_reversed(self):
        sides = rectangle_sides(0, 0, 2, 3)
        segments = [sides[2].flip(), sides[0], sides[3], sides[1].flip()]
        outlines = reconstruct_outlines(segments)

        assert len(outlines) == 1
        assert outlines[0].length == pytest.approx(10.0)

    def test_accepts_point_pairs(self):
        segments = [((0, 0), (1, 0)), ((1, 0), (1, 1)), ((1, 1), (0, 1)), ((0, 1), (0, 0))]
        outlines = reconstruct_outlines(segments)
        assert len(outlines) == 1

    def test_collinear_pieces_are_merged(self):
        """Test that an edge given as overlapping pieces leaves no extra vertices."""
        sides = rectangle_sides(0, 0, 2, 3)
        segments = [Line((0, 0), (1.5, 0)), Line((1, 0), (2, 0))] + sides[1:]
        outlines = reconstruct_outlines(segments)

        assert len(outlines) == 1
        assert len(outlines[0]) == 5

    def test_chord_gives_two_faces(self):
        segments = rectangle_sides(0, 0, 2, 1) + [Line((1, 0), (1, 1))]
        outlines = reconstruct_outlines(segments)

        assert len(outlines) == 2
        assert sorted(round(area(o), 9) for o in outlines) == [1.0, 1.0]

    def test_crossing_grid(self):
        """Test that a hash sign encloses only its middle cell."""
        segments = [
            Line((1, 0), (1, 3)), Line((2, 0), (2, 3)),
            Line((0, 1), (3, 1)), Line((0, 2), (3, 2)),
        ]
        outlines = reconstruct_outlines(segments)

        assert len(outlines) == 1
        assert area(outlines[0]) == pytest.approx(1.0)

    def test_dangling_segment_is_pruned(self, caplog):
        segments = rectangle_sides(0, 0, 1, 1) + [Line((1, 1), (2, 2))]
        with caplog.at_level(logging.INFO, logger="planeforge.topology"):
            outlines = reconstruct_outlines(segments)

        assert len(outlines) == 1
        assert area(outlines[0]) == pytest.approx(1.0)
        assert "Pruned 1 dangling segment" in caplog.text

    def test_small_gaps_are_closed(self):
        segments = [
            Line((0, 0), (1, 0)),
            Line((1, 1e-8), (1, 1)),
            Line((1, 1), (0, 1)),
            Line((0, 1), (0, 1e-8)),
        ]
        assert len(reconstruct_outlines(segments)) == 1

    def test_open_chain_gives_nothing(self):
        segments = [Line((0, 0), (1, 0)), Line((1, 0), (1, 1))]
        assert reconstruct_outlines(segments) == []

    def test_disjoint_rectangles(self):
        segments = rectangle_sides(0, 0, 1, 1) + rectangle_sides(5, 5, 7, 6)
        outlines = reconstruct_outlines(segments)

        assert len(outlines) == 2
        assert sorted(round(area(o), 9) for o in outlines) == [1.0, 2.0]

    def test_vertical_plane(self):
        segments = [
            Line((0, 0, 0), (2, 0, 0)),
            Line((2, 0, 0), (2, 0, 1)),
            Line((2, 0, 1), (0, 0, 1)),
            Line((0, 0, 1), (0, 0, 0)),
        ]
        outlines = reconstruct_outlines(segments)

        assert len(outlines) == 1
        assert area(outlines[0]) == pytest.approx(2.0)
        np.testing.assert_array_almost_equal(outlines[0].points[:, 1], 0.0)

    def test_non_coplanar_cluster_is_skipped(self):
        segments = [
            Line((0, 0, 0), (1, 0, 0)),
            Line((1, 0, 0), (1, 1, 0)),
            Line((1, 1, 0), (0, 1, 0.5)),
            Line((0, 1, 0.5), (0, 0, 0)),
        ]
        with pytest.warns(TopologyWarning, match="not coplanar"):
            outlines = reconstruct_outlines(segments)
        assert outlines == []

    def test_nearly_coplanar_cluster_is_projected(self):
        segments = [
            Line((0, 0, 0), (1, 0, 0)),
            Line((1, 0, 0), (1, 1, 4e-7)),
            Line((1, 1, 4e-7), (0, 1, 0)),
            Line((0, 1, 0), (0, 0, 0)),
        ]
        with pytest.warns(PrecisionWarning):
            outlines = reconstruct_outlines(segments)
        assert len(outlines) == 1


class TestReconstructRegions:
    """Tests for reconstruct_regions function."""

    def test_square_with_hole(self):
        regions = reconstruct_regions(rectangle_sides(0, 0, 4, 4) + rectangle_sides(1, 1, 2, 2))

        assert len(regions) == 1
        assert len(regions[0].holes) == 1
        assert regions[0].area == pytest.approx(15.0)

    def test_island_inside_hole(self):
        segments = rectangle_sides(0, 0, 10, 10) + rectangle_sides(2, 2, 8, 8) + rectangle_sides(4, 4, 6, 6)
        regions = reconstruct_regions(segments)

        assert len(regions) == 2
        assert sorted(len(r.holes) for r in regions) == [0, 1]
        assert sorted(round(r.area, 9) for r in regions) == [4.0, 64.0]

    def test_hole_goes_to_smallest_face(self):
        segments = rectangle_sides(0, 0, 10, 4) + [Line((5, 0), (5, 4))] + rectangle_sides(6, 1, 8, 3)
        regions = reconstruct_regions(segments)

        assert len(regions) == 2
        with_hole = [r for r in regions if r.holes]
        assert len(with_hole) == 1
        assert with_hole[0].area == pytest.approx(16.0)

    def test_disjoint_regions(self):
        regions = reconstruct_regions(rectangle_sides(0, 0, 1, 1) + rectangle_sides(3, 0, 4, 1))
        assert len(regions) == 2
        assert all(not r.holes for r in regions)


class TestGraphAndTracing:
    """Tests for the graph building and tracing steps."""

    def test_clean_and_split_cross(self):
        pieces = clean_and_split([Line((0, 0), (2, 0)), Line((1, -1), (1, 1))])
        assert len(pieces) == 4

    def test_clean_and_split_drops_duplicates(self):
        pieces = clean_and_split([Line((0, 0), (1, 0)), Line((1, 0), (0, 0))])
        assert len(pieces) == 1

    def test_build_graph_snaps_endpoints(self):
        graph = build_graph([Line((0, 0), (1, 0)), Line((1, 1e-9), (1, 1))])

        assert len(graph.nodes) == 3
        assert graph.edges == [(0, 1), (1, 2)]

    def test_prune_removes_trees(self):
        graph = build_graph(rectangle_sides(0, 0, 1, 1) + [Line((1, 1), (2, 2)), Line((2, 2), (3, 2))])

        assert graph.prune() == 2
        assert len(graph.edges) == 4

    def test_outer_boundary_is_clockwise(self):
        coords = np.array([[0, 0], [2, 0], [2, 1], [0, 1]], dtype=float)
        graph = HalfEdgeGraph(coords, [(0, 1), (1, 2), (2, 3), (3, 0)])
        outer = trace_outer_boundary(graph)

        assert len(outer) == 4
        assert graph.cycle_area(outer) == pytest.approx(-2.0)

    def test_faces_are_counter_clockwise(self):
        coords = np.array([[0, 0], [1, 0], [2, 0], [2, 1], [1, 1], [0, 1]], dtype=float)
        edges = [(0, 1), (1, 2), (2, 3), (3, 4), (4, 5), (5, 0), (1, 4)]
        graph = HalfEdgeGraph(coords, edges)
        faces = trace_faces(graph, trace_outer_boundary(graph), 1e-6)

        assert len(faces) == 2
        assert all(len(face) == 4 for face in faces)
