"""
Synthetic sensor readings for seeding and demonstrations.

Readings follow a daily sine pattern around base values, with noise built from
a sum of six uniform(-0.5, 0.5) draws (an approximately Gaussian perturbation).
Not part of the production data path.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import numpy as np
import pandas as pd

from sediment_monitor.models import CalibrationParameters, RawReading
from sediment_monitor.utils import get_logger

logger = get_logger(__name__)

NOISE_SAMPLES = 6
NOMINAL_VOLTAGE = 12.0
CALIBRATION_FORMULA = "value * scale_factor + offset_value"


@dataclass
class BaseValues:
    """Noise-free values a generated reading is centered on."""
    depth: float
    turbidity: float
    temperature: float


def daily_factor(timestamp: datetime) -> float:
    """sin(2*pi*hour/24) for the timestamp's hour of day."""
    return math.sin((timestamp.hour / 24) * 2 * math.pi)


class SyntheticReadingGenerator:
    """Generates plausible raw readings without live hardware."""

    def __init__(self, noise_factor: float = 0.02, seed: Optional[int] = None):
        """
        Args:
            noise_factor: Relative noise applied to depth, turbidity and temperature
            seed: Random seed for reproducible output
        """
        self.noise_factor = noise_factor
        self.rng = np.random.default_rng(seed)

    def add_noise(self, value: float, noise_factor: Optional[float] = None) -> float:
        """Return value * (1 + noise_factor * sum of six uniform(-0.5, 0.5) draws)."""
        if noise_factor is None:
            noise_factor = self.noise_factor
        noise = float(self.rng.uniform(-0.5, 0.5, size=NOISE_SAMPLES).sum())
        return value * (1 + noise_factor * noise)

    def generate(self, base_values: BaseValues, timestamp: datetime, sensor_id: int = 0) -> RawReading:
        """
        Generate one raw reading.

        Args:
            base_values: Values to center depth, turbidity and temperature on
            timestamp: Capture time; its hour drives the daily pattern
            sensor_id: Sensor the reading is attributed to

        Returns:
            Synthetic raw reading stamped with `timestamp`
        """
        d = daily_factor(timestamp)

        return RawReading(
            sensor_id=sensor_id,
            raw_depth=self.add_noise(base_values.depth * (1 + 0.05 * d)),
            raw_turbidity=self.add_noise(base_values.turbidity * (1 + 0.1 * d)),
            raw_temperature=self.add_noise(base_values.temperature + 2 * d),
            voltage=self.add_noise(NOMINAL_VOLTAGE, 0.01),
            battery_level=self.add_noise(85 + 5 * d, 0.005),
            signal_strength=self.add_noise(90 - 5 * abs(d), 0.02),
            captured_at=timestamp,
        )

    def generate_history(
        self,
        sensor_id: int,
        max_depth: float,
        start: datetime,
        end: datetime,
        interval_minutes: int = 30,
        first_id: int = 1
    ) -> pd.DataFrame:
        """
        Generate evenly spaced readings for one sensor between start (inclusive) and end (exclusive).

        Depth is centered on 80% of the location's maximum depth; turbidity and
        temperature base values are redrawn for every reading.

        Args:
            sensor_id: Sensor identifier
            max_depth: Maximum depth of the monitoring location
            start: First capture time
            end: Upper bound of capture times
            interval_minutes: Spacing between readings
            first_id: Raw reading id assigned to the first row

        Returns:
            DataFrame with one row per generated raw reading
        """
        step = timedelta(minutes=interval_minutes)
        rows = []
        current = start
        next_id = first_id

        while current < end:
            base = BaseValues(
                depth=max_depth * 0.8,
                turbidity=5 + float(self.rng.uniform(0, 3)),
                temperature=20 + float(self.rng.uniform(0, 5)),
            )
            reading = self.generate(base, current, sensor_id).model_copy(update={"id": next_id})
            rows.append(reading.model_dump())
            next_id += 1
            current += step

        logger.info(f"Generated {len(rows)} readings for sensor {sensor_id}")
        return pd.DataFrame(rows, columns=list(RawReading.model_fields))

    def generate_calibration(self, sensor_id: int, now: datetime) -> CalibrationParameters:
        """Build a plausible depth calibration taken a week ago and due in 30 days."""
        return CalibrationParameters(
            sensor_id=sensor_id,
            parameter="depth",
            offset_value=float(self.rng.uniform(-0.1, 0.1)),
            scale_factor=float(self.rng.uniform(0.98, 1.02)),
            last_calibration=now - timedelta(days=7),
            next_calibration=now + timedelta(days=30),
            calibration_formula=CALIBRATION_FORMULA,
            created_at=now,
        )
