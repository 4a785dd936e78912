"""
Tests for the moving-average filter and the per-sensor filter registry.
"""

import pytest

from sediment_monitor.components.filtering import MovingAverageFilter, ChannelFilters, FilterRegistry
from sediment_monitor.config import FilterSettings
from sediment_monitor.utils.exceptions import ConfigurationError


class TestMovingAverageFilter:
    """Test suite for MovingAverageFilter."""

    def test_first_value_passes_through(self):
        """An empty filter returns the first input unchanged."""
        f = MovingAverageFilter(5)
        assert f.process(42.5) == 42.5

    def test_ramp_sequence(self):
        """Window-5 filter over [10, 12, 14, 16, 18] yields [10, 11, 12, 13, 14]."""
        f = MovingAverageFilter(5)
        outputs = [f.process(v) for v in [10, 12, 14, 16, 18]]
        assert outputs == [10, 11, 12, 13, 14]

    def test_oldest_value_evicted(self):
        """Values beyond the window are dropped in FIFO order."""
        f = MovingAverageFilter(3)
        for v in [1.0, 2.0, 3.0, 4.0, 5.0]:
            f.process(v)

        assert f.values == [3.0, 4.0, 5.0]
        assert f.process(6.0) == pytest.approx(5.0)

    @pytest.mark.parametrize("window_size", [1, 2, 3, 5, 8])
    def test_length_never_exceeds_window(self, window_size):
        """Window length is capped at N for any number of inputs."""
        f = MovingAverageFilter(window_size)
        for i in range(25):
            f.process(float(i))
            assert len(f) <= window_size
        assert len(f) == window_size

    @pytest.mark.parametrize("window_size", [1, 3, 5])
    def test_output_is_mean_of_recent_inputs(self, window_size):
        """Output after the k-th call is the mean of the last min(k, N) inputs."""
        inputs = [3.5, -1.0, 7.25, 0.0, 12.0, 4.5, -6.0, 9.0]
        f = MovingAverageFilter(window_size)

        for k, value in enumerate(inputs, start=1):
            recent = inputs[max(0, k - window_size):k]
            assert f.process(value) == pytest.approx(sum(recent) / len(recent))

    def test_window_of_one_tracks_input(self):
        f = MovingAverageFilter(1)
        assert [f.process(v) for v in [4.0, 9.0, -2.0]] == [4.0, 9.0, -2.0]

    @pytest.mark.parametrize("window_size", [0, -3, 2.5, "5", None, True])
    def test_invalid_window_rejected(self, window_size):
        """Non-positive or non-integer windows fail at construction."""
        with pytest.raises(ConfigurationError):
            MovingAverageFilter(window_size)

    def test_reset_empties_window(self):
        f = MovingAverageFilter(5)
        f.process(100.0)
        f.reset()

        assert len(f) == 0
        assert f.process(1.0) == 1.0


class TestFilterRegistry:
    """Test suite for FilterRegistry."""

    def test_channel_windows_follow_settings(self):
        filters = ChannelFilters.from_settings(FilterSettings())

        assert filters.depth.window_size == 5
        assert filters.turbidity.window_size == 5
        assert filters.temperature.window_size == 3

    def test_session_lifetime_keeps_state(self):
        """The same filters are returned for a sensor across calls."""
        registry = FilterRegistry(FilterSettings(lifetime="session"))

        first = registry.filters_for(1)
        first.depth.process(10.0)
        second = registry.filters_for(1)

        assert second is first
        assert second.depth.values == [10.0]
        assert 1 in registry

    def test_sensors_are_independent(self):
        registry = FilterRegistry()
        registry.filters_for(1).depth.process(10.0)
        registry.filters_for(2).depth.process(50.0)

        assert registry.filters_for(1).depth.values == [10.0]
        assert registry.filters_for(2).depth.values == [50.0]
        assert registry.sensor_ids == [1, 2]

    def test_per_call_lifetime_starts_empty(self):
        """With per_call lifetime every lookup returns fresh filters."""
        registry = FilterRegistry(FilterSettings(lifetime="per_call"))

        registry.filters_for(1).depth.process(10.0)
        filters = registry.filters_for(1)

        assert len(filters.depth) == 0
        assert registry.sensor_ids == []

    def test_reset_single_sensor(self):
        registry = FilterRegistry()
        registry.filters_for(1).depth.process(10.0)
        registry.filters_for(2).depth.process(20.0)

        registry.reset(1)

        assert 1 not in registry
        assert registry.filters_for(2).depth.values == [20.0]

    def test_reset_all_sensors(self):
        registry = FilterRegistry()
        registry.filters_for(1)
        registry.filters_for(2)

        registry.reset()

        assert registry.sensor_ids == []
