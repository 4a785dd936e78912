#!/usr/bin/env python3
"""
Synthetic data generator for the sediment monitoring pipeline.

- Seeds one depth calibration per sensor into the DuckDB calibration store.
- Writes one Parquet file of raw readings per sensor into data/raw/, covering the
  configured number of days at the configured interval.
- Optionally injects depth spikes to exercise the outlier test.

Usage:
  python scripts/generate_synthetic_raw.py \
    --sensors 1 2 3 \
    --max-depths 4.5 6.0 3.2 \
    --inject-spikes

If no args are provided, defaults are used: sensors=[1, 2, 3], max-depths=[5.0, 5.0, 5.0].
"""

from __future__ import annotations

import argparse
from datetime import datetime, timedelta
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from sediment_monitor.components import DuckDBCalibrationResolver, SyntheticReadingGenerator
from sediment_monitor.config import PipelineConfig
from sediment_monitor.utils import get_logger, setup_logging

logger = get_logger("generate_synthetic_raw")


def inject_spikes(df: pd.DataFrame, rng: np.random.Generator, fraction: float = 0.02) -> pd.DataFrame:
    """Multiply raw depth of a random subset of readings by 10."""
    if df.empty:
        return df
    spiked = df.copy()
    count = max(1, int(len(spiked) * fraction))
    indices = rng.choice(spiked.index, size=count, replace=False)
    spiked.loc[indices, "raw_depth"] = spiked.loc[indices, "raw_depth"] * 10
    return spiked


def write_parquet(df: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=False, engine="pyarrow")
    logger.info(f"Wrote {len(df)} rows to {path}")


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic raw readings and calibrations")
    parser.add_argument("--config", type=Path, default=None, help="Path to YAML configuration")
    parser.add_argument("--sensors", nargs="*", type=int, default=[1, 2, 3], help="Sensor ids to generate")
    parser.add_argument("--max-depths", nargs="*", type=float, default=None,
                        help="Maximum depth per sensor (defaults to 5.0 for every sensor)")
    parser.add_argument("--inject-spikes", action="store_true", help="Multiply a few raw depths by 10")
    args = parser.parse_args(argv)

    setup_logging("INFO")

    # Resolve project root as repo root (parent of scripts/)
    project_root = Path(__file__).resolve().parent.parent
    config = PipelineConfig.from_yaml(args.config or project_root / "config/default.yaml")

    max_depths = args.max_depths or [5.0] * len(args.sensors)
    if len(max_depths) != len(args.sensors):
        parser.error("--max-depths must list one value per sensor")

    settings = config.generator
    generator = SyntheticReadingGenerator(settings.noise_factor, settings.seed)
    store = DuckDBCalibrationResolver(config.paths.calibration_db, config.calibration)
    store.ensure_schema()

    now = datetime.now().replace(second=0, microsecond=0)
    start = now - timedelta(days=settings.history_days)
    next_id = 1

    for sensor_id, max_depth in zip(args.sensors, max_depths):
        store.record(generator.generate_calibration(sensor_id, now))

        df = generator.generate_history(
            sensor_id, max_depth, start, now, settings.interval_minutes, first_id=next_id
        )
        next_id += len(df)

        if args.inject_spikes:
            df = inject_spikes(df, generator.rng)

        write_parquet(df, Path(config.paths.data_raw) / f"sensor_{sensor_id}.parquet")

    store.close()
    logger.info(f"All synthetic files generated in: {config.paths.data_raw}")


if __name__ == "__main__":
    main()
