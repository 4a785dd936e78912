"""Summary statistics used by the outlier test."""

from typing import Sequence, Tuple
import numpy as np


def calculate_stats(values: Sequence[float]) -> Tuple[float, float]:
    """
    Mean and population standard deviation of a sample.

    The variance is divided by N, not N - 1, so a single value has a
    standard deviation of 0.

    Args:
        values: Non-empty numeric sample

    Returns:
        Tuple of (mean, standard deviation)

    Raises:
        ValueError: If values is empty
    """
    if len(values) == 0:
        raise ValueError("Cannot compute statistics of an empty sample")

    sample = np.asarray(values, dtype=float)
    return float(sample.mean()), float(sample.std(ddof=0))


def z_score(value: float, mean: float, std_dev: float) -> float:
    """Absolute z-score of value; 0 when the sample has no spread."""
    if std_dev == 0:
        return 0.0
    return abs((value - mean) / std_dev)
