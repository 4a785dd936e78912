"""
Reading processor for the sediment monitoring pipeline.

Turns one raw sensor reading into one processed reading:
calibration lookup -> smoothing -> depth calibration -> sediment derivation
-> quality scoring -> outlier test.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional
import pandas as pd

from sediment_monitor.components.base import CalibrationResolver, ProcessingComponent
from sediment_monitor.components.calibration import resolve_with_timeout
from sediment_monitor.components.filtering import FilterRegistry
from sediment_monitor.components.statistics import calculate_stats, z_score
from sediment_monitor.config import DerivationSettings, PipelineConfig
from sediment_monitor.models import CalibrationParameters, ProcessedReading, RawReading
from sediment_monitor.utils import get_logger, CalibrationError, ProcessingError

_DEFAULTS = DerivationSettings()

SEDIMENT_TURBIDITY_WEIGHT = _DEFAULTS.sediment_turbidity_weight
SEDIMENT_DEPTH_WEIGHT = _DEFAULTS.sediment_depth_weight
QUALITY_SIGNAL_WEIGHT = _DEFAULTS.quality_signal_weight
QUALITY_BATTERY_WEIGHT = _DEFAULTS.quality_battery_weight
QUALITY_CAP = _DEFAULTS.quality_cap
Z_SCORE_THRESHOLD = _DEFAULTS.z_score_threshold
PROCESSING_METHOD = _DEFAULTS.processing_method

PROCESSED_COLUMNS = [
    "raw_reading_id",
    "sensor_id",
    "captured_at",
    "depth",
    "turbidity",
    "temperature",
    "sediment_level",
    "quality_score",
    "is_outlier",
    "processing_method",
]


def sediment_level(
    turbidity: float,
    depth: float,
    turbidity_weight: float = SEDIMENT_TURBIDITY_WEIGHT,
    depth_weight: float = SEDIMENT_DEPTH_WEIGHT
) -> float:
    """Sediment level as a fixed linear combination of smoothed turbidity and calibrated depth."""
    return turbidity_weight * turbidity + depth_weight * depth


def quality_score(
    signal_strength: float,
    battery_level: float,
    signal_weight: float = QUALITY_SIGNAL_WEIGHT,
    battery_weight: float = QUALITY_BATTERY_WEIGHT,
    cap: float = QUALITY_CAP
) -> float:
    """
    Weighted health indicator from signal strength and battery level percentages.

    Clamped to [0, cap], so out-of-range percentages never leave the score
    outside its bounds.
    """
    score = signal_weight * (signal_strength / 100) + battery_weight * (battery_level / 100)
    return max(0.0, min(cap, score))


def is_outlier(raw_value: float, smoothed_value: float, threshold: float = Z_SCORE_THRESHOLD) -> bool:
    """
    Spike test of a raw value against its smoothed trend.

    The sample is just [smoothed_value, raw_value]. When both are equal the
    spread is zero and the value is never an outlier. With two distinct points
    the z-score is always 1, so the default threshold of 3 never fires.
    """
    mean, std_dev = calculate_stats([smoothed_value, raw_value])
    if std_dev == 0:
        return False
    return z_score(raw_value, mean, std_dev) > threshold


class ReadingProcessor(ProcessingComponent):
    """Drives raw readings through calibration, smoothing, derivation and scoring."""

    def __init__(
        self,
        config: PipelineConfig,
        resolver: CalibrationResolver,
        registry: Optional[FilterRegistry] = None
    ):
        """
        Initialize the processor.

        Args:
            config: Pipeline configuration
            resolver: Source of per-sensor calibration
            registry: Filter owner; a new one built from config.filters when omitted
        """
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.resolver = resolver
        self.registry = registry or FilterRegistry(config.filters)
        self.derivation = config.derivation
        self._lookup_executor = ThreadPoolExecutor(
            max_workers=config.calibration.lookup_workers, thread_name_prefix="calibration"
        )

        self.stats = {
            "readings_processed": 0,
            "outliers_detected": 0,
            "calibration_lookups": 0,
            "identity_calibrations": 0,
        }

    def process(self, raw: RawReading, sensor_id: int) -> ProcessedReading:
        """
        Process one raw reading.

        Args:
            raw: Unprocessed sensor sample
            sensor_id: Sensor the sample came from

        Returns:
            Processed reading

        Raises:
            CalibrationError: If calibration could not be resolved (filters are left untouched)
        """
        # Resolve first so a failed lookup never leaves half-applied filter state
        calibration = self._resolve_calibration(sensor_id)

        filters = self.registry.filters_for(sensor_id)
        smoothed_depth = filters.depth.process(raw.raw_depth)
        smoothed_turbidity = filters.turbidity.process(raw.raw_turbidity)
        smoothed_temperature = filters.temperature.process(raw.raw_temperature)

        calibrated_depth = calibration.apply(smoothed_depth)

        sediment = sediment_level(
            smoothed_turbidity,
            calibrated_depth,
            self.derivation.sediment_turbidity_weight,
            self.derivation.sediment_depth_weight,
        )
        score = quality_score(
            raw.signal_strength,
            raw.battery_level,
            self.derivation.quality_signal_weight,
            self.derivation.quality_battery_weight,
            self.derivation.quality_cap,
        )
        outlier = is_outlier(raw.raw_depth, smoothed_depth, self.derivation.z_score_threshold)

        self.stats["readings_processed"] += 1
        if outlier:
            self.stats["outliers_detected"] += 1
            self.logger.warning(
                f"Sensor {sensor_id}: raw depth {raw.raw_depth:.3f} flagged as outlier "
                f"(smoothed {smoothed_depth:.3f})"
            )

        self.logger.debug(
            f"Sensor {sensor_id}: depth={calibrated_depth:.3f} turbidity={smoothed_turbidity:.3f} "
            f"temperature={smoothed_temperature:.3f} sediment={sediment:.3f} quality={score:.3f}"
        )

        return ProcessedReading(
            depth=calibrated_depth,
            turbidity=smoothed_turbidity,
            temperature=smoothed_temperature,
            sediment_level=sediment,
            quality_score=score,
            is_outlier=outlier,
            processing_method=self.derivation.processing_method,
        )

    def execute(self, raw_data: pd.DataFrame) -> pd.DataFrame:
        """
        Process a table of raw readings in capture order per sensor.

        Args:
            raw_data: Raw readings with the RawReading columns

        Returns:
            One processed row per raw reading

        Raises:
            CalibrationError: If a calibration lookup fails
            ProcessingError: If a row cannot be processed
        """
        self.logger.info("Starting reading processing")

        if raw_data.empty:
            self.logger.warning("No readings to process")
            return pd.DataFrame(columns=PROCESSED_COLUMNS)

        ordered = raw_data
        if "captured_at" in ordered.columns:
            ordered = ordered.sort_values(["sensor_id", "captured_at"], kind="stable")

        rows: List[Dict] = []
        for record in ordered.to_dict(orient="records"):
            try:
                raw = RawReading(**self._clean_record(record))
                processed = self.process(raw, raw.sensor_id)
            except CalibrationError:
                raise
            except Exception as e:
                self.logger.error(f"Failed to process reading {record.get('id')}: {e}")
                raise ProcessingError(f"Reading processing failed: {e}") from e

            row = processed.to_record(raw.id, raw.sensor_id)
            row["captured_at"] = raw.captured_at
            rows.append(row)

        processed_frame = pd.DataFrame(rows, columns=PROCESSED_COLUMNS)
        self._log_processing_summary()
        self.logger.info(f"Processing completed: {len(processed_frame)} readings")
        return processed_frame

    def _resolve_calibration(self, sensor_id: int) -> CalibrationParameters:
        self.stats["calibration_lookups"] += 1
        calibration = resolve_with_timeout(
            self.resolver,
            sensor_id,
            self.config.calibration.lookup_timeout_seconds,
            self._lookup_executor,
        )
        if calibration.is_identity:
            self.stats["identity_calibrations"] += 1
        return calibration

    def close(self) -> None:
        """Release calibration lookup threads; lookups still running are abandoned."""
        self._lookup_executor.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _clean_record(record: Dict) -> Dict:
        """Map pandas missing markers to None so optional fields validate."""
        cleaned = {}
        for key, value in record.items():
            if key in ("id", "captured_at") and pd.isna(value):
                cleaned[key] = None
            elif key == "captured_at":
                cleaned[key] = pd.Timestamp(value).to_pydatetime()
            elif key in ("id", "sensor_id"):
                cleaned[key] = int(value)
            else:
                cleaned[key] = value
        return cleaned

    def _log_processing_summary(self) -> None:
        """Log processing statistics."""
        self.logger.info("=== Processing Summary ===")
        for key, value in self.stats.items():
            self.logger.info(f"{key.replace('_', ' ').title()}: {value}")

        if self.stats["readings_processed"] > 0:
            outlier_rate = (self.stats["outliers_detected"] / self.stats["readings_processed"]) * 100
            self.logger.info(f"Outlier Rate: {outlier_rate:.1f}%")
