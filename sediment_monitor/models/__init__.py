"""Data models for the sediment monitoring pipeline."""

from .data import RawReading, CalibrationParameters, ProcessedReading, BatchResult

__all__ = ["RawReading", "CalibrationParameters", "ProcessedReading", "BatchResult"]
