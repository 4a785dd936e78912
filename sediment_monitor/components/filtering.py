"""
Moving-average smoothing for sensor channels.

Each physical channel (depth, turbidity, temperature) of each sensor gets its
own MovingAverageFilter. FilterRegistry owns those filters so their state
survives between readings of the same monitoring session.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from sediment_monitor.config import FilterSettings
from sediment_monitor.utils import get_logger, ConfigurationError

logger = get_logger(__name__)


class MovingAverageFilter:
    """
    Bounded-window moving average.

    Keeps the last `window_size` values in FIFO order and returns their
    arithmetic mean after every new value. process() mutates the window and is
    not safe to call concurrently on one instance.
    """

    __slots__ = ('window_size', '_values')

    def __init__(self, window_size: int):
        """
        Args:
            window_size: Number of most recent values averaged (>= 1)

        Raises:
            ConfigurationError: If window_size is not a positive integer
        """
        if isinstance(window_size, bool) or not isinstance(window_size, int) or window_size < 1:
            raise ConfigurationError(f"Filter window size must be a positive integer, got {window_size!r}")

        self.window_size = window_size
        self._values = deque(maxlen=window_size)

    def process(self, value: float) -> float:
        """Add a value, evicting the oldest beyond the window, and return the current mean."""
        self._values.append(value)
        return sum(self._values) / len(self._values)

    @property
    def values(self) -> List[float]:
        """Snapshot of the window, oldest first."""
        return list(self._values)

    def reset(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


@dataclass
class ChannelFilters:
    """The three filters used for one sensor."""
    depth: MovingAverageFilter
    turbidity: MovingAverageFilter
    temperature: MovingAverageFilter

    @classmethod
    def from_settings(cls, settings: FilterSettings) -> "ChannelFilters":
        return cls(
            depth=MovingAverageFilter(settings.depth_window),
            turbidity=MovingAverageFilter(settings.turbidity_window),
            temperature=MovingAverageFilter(settings.temperature_window),
        )

    def reset(self) -> None:
        self.depth.reset()
        self.turbidity.reset()
        self.temperature.reset()


class FilterRegistry:
    """
    Per-sensor filter ownership.

    With lifetime "session" a sensor's filters are created on first use and
    kept until reset; with "per_call" every lookup hands out empty filters, so
    each reading is smoothed on its own.

    Filters of different sensors are independent. Readings of one sensor must
    be processed by one caller at a time.
    """

    def __init__(self, settings: Optional[FilterSettings] = None):
        self.settings = settings or FilterSettings()
        self._filters: Dict[int, ChannelFilters] = {}

    @property
    def persistent(self) -> bool:
        return self.settings.lifetime == "session"

    def filters_for(self, sensor_id: int) -> ChannelFilters:
        """Return the filters owned for a sensor, creating them if needed."""
        if not self.persistent:
            return ChannelFilters.from_settings(self.settings)

        filters = self._filters.get(sensor_id)
        if filters is None:
            logger.debug(f"Creating filters for sensor {sensor_id}")
            filters = ChannelFilters.from_settings(self.settings)
            self._filters[sensor_id] = filters
        return filters

    def reset(self, sensor_id: Optional[int] = None) -> None:
        """Drop filter state for one sensor, or for all sensors when sensor_id is None."""
        if sensor_id is None:
            self._filters.clear()
            logger.info("Reset filter state for all sensors")
        elif self._filters.pop(sensor_id, None) is not None:
            logger.info(f"Reset filter state for sensor {sensor_id}")

    @property
    def sensor_ids(self) -> List[int]:
        return sorted(self._filters)

    def __contains__(self, sensor_id: int) -> bool:
        return sensor_id in self._filters
