"""
Pydantic models for data structures used throughout the pipeline.

These models ensure type safety and validation for data flowing between components.
Calibration rows and processed readings are frozen: they are written once and
only ever referenced afterwards.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawReading(BaseModel):
    """One unprocessed sample from a physical sensor."""
    id: Optional[int] = Field(None, description="Storage identity of the raw row, once persisted")
    sensor_id: int = Field(..., description="Sensor (monitoring location) identifier")
    raw_depth: float = Field(..., description="Uncalibrated water depth")
    raw_turbidity: float = Field(..., description="Uncalibrated turbidity")
    raw_temperature: float = Field(..., description="Uncalibrated water temperature")
    voltage: float = Field(..., description="Supply voltage")
    battery_level: float = Field(..., description="Battery level percentage (0-100)")
    signal_strength: float = Field(..., description="Signal strength percentage (0-100)")
    captured_at: Optional[datetime] = Field(None, description="Capture time, assigned by storage on insert")

    @field_validator(
        'raw_depth', 'raw_turbidity', 'raw_temperature',
        'voltage', 'battery_level', 'signal_strength'
    )
    @classmethod
    def must_be_finite(cls, v):
        if not math.isfinite(v):
            raise ValueError("sensor values must be finite")
        return v


class CalibrationParameters(BaseModel):
    """Latest calibration of one sensor for one physical parameter."""
    model_config = ConfigDict(frozen=True)

    sensor_id: int = Field(..., description="Sensor the calibration belongs to")
    parameter: str = Field("depth", description="Calibrated parameter name")
    offset_value: float = Field(0.0, description="Additive offset applied after scaling")
    scale_factor: float = Field(1.0, description="Multiplicative scale factor")
    last_calibration: Optional[datetime] = Field(None, description="When the sensor was last calibrated")
    next_calibration: Optional[datetime] = Field(None, description="When the next calibration is due")
    calibration_formula: Optional[str] = Field(None, description="Human-readable formula (not evaluated)")
    created_at: Optional[datetime] = Field(None, description="When the calibration row was written")

    @classmethod
    def identity(cls, sensor_id: int, parameter: str = "depth") -> "CalibrationParameters":
        """Calibration used when a sensor has never been calibrated."""
        return cls(sensor_id=sensor_id, parameter=parameter, offset_value=0.0, scale_factor=1.0)

    @property
    def is_identity(self) -> bool:
        return self.offset_value == 0.0 and self.scale_factor == 1.0

    def apply(self, value: float) -> float:
        """Convert a sensor value to physical units: value * scale_factor + offset_value."""
        return value * self.scale_factor + self.offset_value


class ProcessedReading(BaseModel):
    """Pipeline output for exactly one raw reading."""
    model_config = ConfigDict(frozen=True)

    depth: float = Field(..., description="Smoothed and calibrated depth")
    turbidity: float = Field(..., description="Smoothed turbidity")
    temperature: float = Field(..., description="Smoothed temperature")
    sediment_level: float = Field(..., description="Sediment level derived from turbidity and depth")
    quality_score: float = Field(..., ge=0.0, le=1.0, description="Reading confidence in [0, 1]")
    is_outlier: bool = Field(..., description="Whether raw depth deviates from its smoothed trend")
    processing_method: str = Field("moving_average", description="Algorithm that produced the record")

    def to_record(self, raw_reading_id: Optional[int], sensor_id: int) -> Dict[str, Any]:
        """
        Build the row the storage collaborator writes for this reading.

        Args:
            raw_reading_id: Identity of the persisted raw reading
            sensor_id: Sensor the reading came from

        Returns:
            Dictionary matching the processed reading table layout
        """
        record = {"raw_reading_id": raw_reading_id, "sensor_id": sensor_id}
        record.update(self.model_dump())
        return record


class BatchResult(BaseModel):
    """Overall result of a batch pipeline run."""
    success: bool = Field(..., description="Whether the run completed successfully")
    records_processed: int = Field(..., description="Number of raw readings processed")
    outliers_flagged: int = Field(0, description="Number of processed readings flagged as outliers")
    sensors_seen: List[int] = Field(default_factory=list, description="Sensors present in the batch")
    output_path: Optional[str] = Field(None, description="Where processed readings were written, if anywhere")
    execution_time_seconds: float = Field(..., description="Total execution time")
    errors: List[str] = Field(default_factory=list, description="Any errors encountered")
