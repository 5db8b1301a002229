"""Tests for the metrics module."""

import pytest

from planeforge import Polyline
from planeforge.metrics import measure_polyline, total_area


def square(size):
    return Polyline([(0, 0), (size, 0), (size, size), (0, size), (0, 0)])


class TestMeasurePolyline:
    """Tests for measure_polyline function."""

    def test_closed_curve(self):
        metrics = measure_polyline(square(10))

        assert metrics["is_closed"] is True
        assert metrics["vertex_count"] == 4
        assert metrics["length"] == pytest.approx(40.0)
        assert metrics["area"] == pytest.approx(100.0)
        assert metrics["area_ratio"] is None  # No original provided

    def test_with_original(self):
        metrics = measure_polyline(square(8), original=square(10))
        assert metrics["area_ratio"] == pytest.approx(0.64)

    def test_open_curve(self):
        metrics = measure_polyline(Polyline([(0, 0), (3, 0), (3, 4)]))

        assert metrics["is_closed"] is False
        assert metrics["vertex_count"] == 3
        assert metrics["length"] == pytest.approx(7.0)
        assert metrics["area"] is None

    def test_degenerate_original(self):
        flat = Polyline([(0, 0), (1, 0), (0, 0)])
        assert measure_polyline(square(1), original=flat)["area_ratio"] is None


class TestTotalArea:
    """Tests for total_area function."""

    def test_sum(self):
        assert total_area([square(1), square(2)]) == pytest.approx(5.0)

    def test_open_curves_ignored(self):
        assert total_area([square(1), Polyline([(0, 0), (5, 0), (5, 5)])]) == pytest.approx(1.0)

    def test_empty(self):
        assert total_area([]) == 0
