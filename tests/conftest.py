"""
Pytest configuration and shared fixtures for testing.

Provides common test fixtures and setup for all test modules.
"""

import tempfile
import pytest
from pathlib import Path
from datetime import datetime, timedelta
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from sediment_monitor.config import PipelineConfig
from sediment_monitor.models import RawReading


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_config(temp_dir):
    """Create a test configuration with temporary paths."""
    config_data = {
        "pipeline": {
            "name": "test_sediment_monitoring_pipeline",
            "version": "1.0.0"
        },
        "paths": {
            "data_raw": str(temp_dir / "raw"),
            "data_processed": str(temp_dir / "processed"),
            "calibration_db": ":memory:"
        },
        "filters": {
            "depth_window": 5,
            "turbidity_window": 5,
            "temperature_window": 3,
            "lifetime": "session"
        },
        "derivation": {
            "sediment_turbidity_weight": 0.8,
            "sediment_depth_weight": 0.2,
            "quality_signal_weight": 0.7,
            "quality_battery_weight": 0.3,
            "quality_cap": 1.0,
            "z_score_threshold": 3.0,
            "processing_method": "moving_average"
        },
        "calibration": {
            "table": "sensor_calibration",
            "lookup_timeout_seconds": 2.0,
            "default_parameter": "depth"
        },
        "generator": {
            "noise_factor": 0.02,
            "seed": 7,
            "interval_minutes": 30,
            "history_days": 1
        }
    }

    return PipelineConfig(**config_data)


def make_reading(sensor_id: int = 1, **overrides) -> RawReading:
    """Build a raw reading with calm, healthy defaults."""
    values = {
        "sensor_id": sensor_id,
        "raw_depth": 10.0,
        "raw_turbidity": 6.0,
        "raw_temperature": 21.0,
        "voltage": 12.0,
        "battery_level": 85.0,
        "signal_strength": 90.0,
    }
    values.update(overrides)
    return RawReading(**values)


@pytest.fixture
def raw_reading():
    """A single healthy raw reading for sensor 1."""
    return make_reading()


@pytest.fixture
def sample_raw_frame():
    """Raw readings for two sensors, deliberately out of capture order."""
    start = datetime(2025, 3, 28, 8, 0, 0)
    data = {
        "id": [1, 2, 3, 4, 5],
        "sensor_id": [1, 2, 1, 2, 1],
        "raw_depth": [10.0, 4.0, 12.0, 4.2, 14.0],
        "raw_turbidity": [6.0, 7.0, 6.5, 7.5, 7.0],
        "raw_temperature": [21.0, 19.0, 21.5, 19.5, 22.0],
        "voltage": [12.0, 12.1, 11.9, 12.0, 12.0],
        "battery_level": [85.0, 80.0, 85.0, 80.0, 84.0],
        "signal_strength": [90.0, 88.0, 89.0, 87.0, 90.0],
        "captured_at": [
            start,
            start,
            start + timedelta(minutes=30),
            start + timedelta(minutes=30),
            start + timedelta(minutes=60),
        ],
    }
    frame = pd.DataFrame(data)
    # Shuffle rows so ordering by capture time is exercised
    return frame.iloc[[4, 1, 0, 3, 2]].reset_index(drop=True)


def create_test_parquet_file(data: pd.DataFrame, file_path: Path) -> None:
    """
    Create a test Parquet file from DataFrame.

    Args:
        data: DataFrame to save
        file_path: Path where to save the file
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(data, preserve_index=False)
    pq.write_table(table, file_path)


@pytest.fixture
def sample_parquet_files(sample_config, sample_raw_frame):
    """Write the sample readings as one Parquet file per sensor."""
    raw_dir = Path(sample_config.paths.data_raw)
    files = []
    for sensor_id, group in sample_raw_frame.groupby("sensor_id"):
        file_path = raw_dir / f"sensor_{sensor_id}.parquet"
        create_test_parquet_file(group.reset_index(drop=True), file_path)
        files.append(file_path)
    return files
