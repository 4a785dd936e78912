"""Pipeline components for sediment monitoring sensor data processing."""

from .base import (
    PipelineComponent,
    CalibrationResolver,
    IngestionComponent,
    ProcessingComponent
)

from .filtering import MovingAverageFilter, ChannelFilters, FilterRegistry
from .statistics import calculate_stats
from .calibration import DuckDBCalibrationResolver, InMemoryCalibrationResolver, resolve_with_timeout
from .processing import ReadingProcessor
from .generation import BaseValues, SyntheticReadingGenerator
from .ingestion import ParquetReadingSource

__all__ = [
    "PipelineComponent",
    "CalibrationResolver",
    "IngestionComponent",
    "ProcessingComponent",
    "MovingAverageFilter",
    "ChannelFilters",
    "FilterRegistry",
    "calculate_stats",
    "DuckDBCalibrationResolver",
    "InMemoryCalibrationResolver",
    "resolve_with_timeout",
    "ReadingProcessor",
    "BaseValues",
    "SyntheticReadingGenerator",
    "ParquetReadingSource"
]
