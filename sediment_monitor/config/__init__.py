"""Configuration models for the sediment monitoring pipeline."""

from .models import (
    PipelineConfig,
    PipelineInfo,
    DataPaths,
    SchemaDefinition,
    FilterSettings,
    DerivationSettings,
    CalibrationSettings,
    GeneratorSettings,
)

__all__ = [
    "PipelineConfig",
    "PipelineInfo",
    "DataPaths",
    "SchemaDefinition",
    "FilterSettings",
    "DerivationSettings",
    "CalibrationSettings",
    "GeneratorSettings",
]
