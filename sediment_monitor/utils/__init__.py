"""Utility modules for the sediment monitoring pipeline."""

from .logging import setup_logging, get_logger
from .exceptions import (
    PipelineError,
    ConfigurationError,
    CalibrationError,
    CalibrationTimeoutError,
    IngestionError,
    ProcessingError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "PipelineError",
    "ConfigurationError",
    "CalibrationError",
    "CalibrationTimeoutError",
    "IngestionError",
    "ProcessingError",
]
