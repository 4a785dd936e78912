"""
Tests for the statistics helper used by the outlier test.
"""

import math
import pytest

from sediment_monitor.components.statistics import calculate_stats, z_score


class TestCalculateStats:
    """Test suite for calculate_stats."""

    def test_population_standard_deviation(self):
        """Variance is divided by N, not N - 1."""
        mean, std_dev = calculate_stats([2, 4, 4, 4, 5, 5, 7, 9])

        assert mean == pytest.approx(5.0)
        assert std_dev == pytest.approx(2.0)

    def test_two_point_sample(self):
        mean, std_dev = calculate_stats([10.0, 1000.0])

        assert mean == pytest.approx(505.0)
        assert std_dev == pytest.approx(495.0)

    def test_single_value_has_zero_spread(self):
        mean, std_dev = calculate_stats([3.25])

        assert mean == 3.25
        assert std_dev == 0.0

    def test_identical_values_have_zero_spread(self):
        _, std_dev = calculate_stats([7.0, 7.0])
        assert std_dev == 0.0

    def test_empty_sample_rejected(self):
        with pytest.raises(ValueError):
            calculate_stats([])

    def test_returns_plain_floats(self):
        mean, std_dev = calculate_stats([1, 2, 3])
        assert type(mean) is float
        assert type(std_dev) is float
        assert math.isfinite(std_dev)


class TestZScore:
    """Test suite for z_score."""

    def test_absolute_value(self):
        assert z_score(1.0, 5.0, 2.0) == pytest.approx(2.0)

    def test_zero_spread_is_zero(self):
        assert z_score(5.0, 5.0, 0.0) == 0.0
