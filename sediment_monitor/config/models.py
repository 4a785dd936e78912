"""
Pydantic models for pipeline configuration.

These models provide type-safe parsing and validation of the YAML configuration file.
The derivation constants (sediment and quality weights, z-score threshold) live here
so they are documented and testable in one place instead of scattered as literals.
"""

from pathlib import Path
from typing import List, Literal, Optional, Union
import yaml
from pydantic import BaseModel, Field, field_validator, ConfigDict


PROJECT_ROOT = Path(__file__).parent.parent.parent


def _resolve_project_path(value):
    """Resolve a relative path against the project root, leaving ':memory:' alone."""
    if isinstance(value, str) and value != ":memory:":
        path = Path(value)
        if not path.is_absolute():
            path = (PROJECT_ROOT / value).resolve()
        return str(path)
    return value


class PipelineInfo(BaseModel):
    """Basic pipeline metadata."""
    name: str = Field(..., description="Pipeline name")
    version: str = Field(..., description="Pipeline version")


class DataPaths(BaseModel):
    """File system locations used by batch runs."""
    data_raw: str = Field(..., description="Directory containing raw reading parquet files")
    data_processed: str = Field(..., description="Directory for processed reading output")
    calibration_db: str = Field(":memory:", description="DuckDB database holding sensor_calibration")

    @field_validator('data_raw', 'data_processed', 'calibration_db', mode='before')
    @classmethod
    def resolve_paths(cls, v):
        """Convert relative paths to absolute paths."""
        return _resolve_project_path(v)


class SchemaDefinition(BaseModel):
    """Expected columns of raw reading files."""
    model_config = ConfigDict(extra='forbid')

    expected_columns: List[str] = Field(
        default_factory=lambda: [
            "id", "sensor_id", "raw_depth", "raw_turbidity", "raw_temperature",
            "voltage", "battery_level", "signal_strength", "captured_at",
        ],
        description="Required column names"
    )


class FilterSettings(BaseModel):
    """Moving-average window sizes per channel and filter state lifetime."""
    depth_window: int = Field(5, description="Window size of the depth filter")
    turbidity_window: int = Field(5, description="Window size of the turbidity filter")
    temperature_window: int = Field(3, description="Window size of the temperature filter")
    lifetime: Literal["session", "per_call"] = Field(
        "session",
        description="'session' keeps filter state per sensor across readings, "
                    "'per_call' starts from empty filters on every reading"
    )

    @field_validator('depth_window', 'turbidity_window', 'temperature_window')
    @classmethod
    def window_must_be_positive(cls, v):
        """Reject windows that cannot hold a single sample."""
        if v < 1:
            raise ValueError(f"window size must be a positive integer, got {v}")
        return v


class DerivationSettings(BaseModel):
    """Constants used to derive sediment level, quality score and the outlier flag."""
    sediment_turbidity_weight: float = Field(0.8, description="Weight of smoothed turbidity in sediment level")
    sediment_depth_weight: float = Field(0.2, description="Weight of calibrated depth in sediment level")
    quality_signal_weight: float = Field(0.7, description="Weight of signal strength in quality score")
    quality_battery_weight: float = Field(0.3, description="Weight of battery level in quality score")
    quality_cap: float = Field(1.0, gt=0.0, le=1.0, description="Upper bound of the quality score")
    z_score_threshold: float = Field(3.0, description="Z-score above which raw depth is an outlier")
    processing_method: str = Field("moving_average", description="Tag stored with every processed reading")


class CalibrationSettings(BaseModel):
    """Calibration store settings."""
    table: str = Field("sensor_calibration", description="Table holding calibration rows")
    lookup_timeout_seconds: float = Field(5.0, gt=0, description="Upper bound for one calibration lookup")
    lookup_workers: int = Field(2, ge=1, description="Worker threads a processor keeps for calibration lookups")
    default_parameter: str = Field("depth", description="Parameter name of the identity calibration")


class GeneratorSettings(BaseModel):
    """Synthetic reading generation settings."""
    noise_factor: float = Field(0.02, ge=0, description="Relative noise applied to generated readings")
    seed: Optional[int] = Field(None, description="Random seed for reproducible runs")
    interval_minutes: int = Field(30, gt=0, description="Spacing between generated historical readings")
    history_days: int = Field(7, gt=0, description="Days of history generated per sensor")


class PipelineConfig(BaseModel):
    """Complete pipeline configuration model."""
    model_config = ConfigDict(
        # Allow population by alias so YAML can use "schema"
        populate_by_name=True,
        extra='forbid'
    )

    pipeline: PipelineInfo = Field(..., description="Pipeline metadata")
    paths: DataPaths = Field(..., description="File system paths")
    data_schema: SchemaDefinition = Field(
        default_factory=SchemaDefinition, description="Raw reading schema", alias="schema"
    )
    filters: FilterSettings = Field(default_factory=FilterSettings, description="Smoothing filter settings")
    derivation: DerivationSettings = Field(default_factory=DerivationSettings, description="Derived value constants")
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings, description="Calibration store settings")
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings, description="Synthetic data settings")

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "PipelineConfig":
        """Load configuration from YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)

        return cls(**config_data)
