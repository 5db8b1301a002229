"""Tests for density-based clustering."""

import numpy as np
import pytest

from planeforge.clustering import cluster, cluster_point_indices, cluster_points, cull_duplicates
from planeforge.core import ConfigurationError


class TestClusterPoints:
    """Tests for cluster_points function."""

    def test_two_groups(self):
        """Test that a close pair and a far point form two clusters."""
        clusters = cluster_points([(0, 0), (0.05, 0), (10, 10)], threshold=0.1)

        assert len(clusters) == 2
        assert [len(c) for c in clusters] == [2, 1]

    def test_chain_is_one_cluster(self):
        """Test that reachability is transitive along a chain."""
        points = [(0.09 * i, 0) for i in range(10)]
        assert len(cluster_points(points, threshold=0.1)) == 1

    def test_threshold_is_inclusive(self):
        assert len(cluster_points([(0, 0), (0.5, 0)], threshold=0.5)) == 1

    def test_noise_with_min_neighbors(self):
        """Test that isolated points become noise when neighbours are required."""
        points = [(0, 0), (0.01, 0), (0.02, 0), (5, 5)]
        clusters, noise = cluster_points(points, threshold=0.1, min_neighbors=2, return_noise=True)

        assert len(clusters) == 1
        assert len(clusters[0]) == 3
        assert len(noise) == 1
        np.testing.assert_array_almost_equal(noise[0], [5, 5, 0])

    def test_three_dimensional_distance(self):
        """Test that points stacked in z are not merged by the XY index."""
        clusters = cluster_points([(0, 0, 0), (0, 0, 1)], threshold=0.1)
        assert len(clusters) == 2

    def test_empty_input(self):
        assert cluster_points([], threshold=1.0) == []

    def test_invalid_min_neighbors(self):
        with pytest.raises(ConfigurationError, match="min_neighbors"):
            cluster_points([(0, 0)], threshold=1.0, min_neighbors=0)

    def test_indices(self):
        clusters, noise = cluster_point_indices([(0, 0), (10, 0), (0.05, 0)], threshold=0.1)
        assert clusters == [[0, 2], [1]]
        assert noise == []


class TestCluster:
    """Tests for the generic cluster function."""

    def test_adjacency_predicate(self):
        words = ['apple', 'apricot', 'banana', 'blueberry', 'cherry']
        result = cluster(words, lambda a, b: a[0] == b[0])

        assert result == [['apple', 'apricot'], ['banana', 'blueberry'], ['cherry']]

    def test_metric_and_threshold(self):
        result = cluster([1.0, 1.5, 9.0], metric=lambda a, b: abs(a - b), threshold=1.0)
        assert result == [[1.0, 1.5], [9.0]]

    def test_missing_criteria(self):
        with pytest.raises(ConfigurationError):
            cluster([1, 2, 3])

    def test_results_follow_input_order(self):
        result = cluster([3, 1, 2], lambda a, b: True)
        assert result == [[3, 1, 2]]


class TestCullDuplicates:
    """Tests for cull_duplicates function."""

    def test_merges_close_points(self):
        result = cull_duplicates([(0, 0), (0, 1e-9), (1, 1)])
        assert len(result) == 2

    def test_keeps_distinct_points(self):
        result = cull_duplicates([(0, 0), (1, 0), (2, 0)])
        assert len(result) == 3

    def test_mean_position(self):
        result = cull_duplicates([(0, 0), (0.2, 0)], tolerance=0.5)
        np.testing.assert_array_almost_equal(result[0], [0.1, 0, 0])
