"""
Custom exceptions for the sediment monitoring pipeline.

Calibration failures carry the sensor they were raised for, so callers can
tell a failed lookup apart from any other pipeline problem.
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""
    pass


class ConfigurationError(PipelineError):
    """Raised when configuration is invalid, e.g. a non-positive filter window."""
    pass


class CalibrationError(PipelineError):
    """Raised when calibration parameters cannot be read from the store."""

    def __init__(self, message: str, sensor_id: Optional[int] = None):
        super().__init__(message)
        self.sensor_id = sensor_id


class CalibrationTimeoutError(CalibrationError):
    """Raised when the calibration lookup does not finish within its timeout."""
    pass


class IngestionError(PipelineError):
    """Raised when raw reading ingestion fails."""
    pass


class ProcessingError(PipelineError):
    """Raised when batch processing of raw readings fails."""
    pass
