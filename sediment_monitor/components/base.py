"""
Abstract base classes for pipeline components.

These define the interfaces that pipeline components must implement, so the
reading processor can be handed any calibration source and the batch pipeline
any reading source (dependency injection instead of a shared backend client).
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional
import pandas as pd

from sediment_monitor.config import PipelineConfig
from sediment_monitor.models import CalibrationParameters


class PipelineComponent(ABC):
    """Base class for all pipeline components."""

    def __init__(self, config: PipelineConfig):
        """Initialize component with pipeline configuration."""
        self.config = config

    @abstractmethod
    def execute(self, *args, **kwargs) -> Any:
        """Execute the component's main functionality."""
        pass


class CalibrationResolver(ABC):
    """Supplies the most recent calibration for a sensor."""

    @abstractmethod
    def resolve(self, sensor_id: int) -> CalibrationParameters:
        """
        Look up the latest calibration for a sensor.

        Args:
            sensor_id: Sensor identifier

        Returns:
            Most recently created calibration, or the identity calibration
            when the sensor has none

        Raises:
            CalibrationError: If the store cannot be read
        """
        pass


class IngestionComponent(PipelineComponent):
    """Abstract base for raw reading sources."""

    @abstractmethod
    def execute(self, data_path: Optional[Path] = None) -> pd.DataFrame:
        """
        Ingest raw readings from source.

        Args:
            data_path: Optional specific file path, otherwise uses config paths

        Returns:
            Raw readings as pandas DataFrame
        """
        pass


class ProcessingComponent(PipelineComponent):
    """Abstract base for components turning raw readings into processed readings."""

    @abstractmethod
    def execute(self, raw_data: pd.DataFrame) -> pd.DataFrame:
        """
        Process a table of raw readings.

        Args:
            raw_data: Raw readings from ingestion

        Returns:
            One processed row per raw reading
        """
        pass
