"""
Batch pipeline for sediment monitoring sensor data.

Coordinates raw reading ingestion and reading processing, and optionally
writes the processed readings to Parquet:
ingestion -> processing -> (output)
"""

import argparse
import time
from pathlib import Path
from typing import Optional

from sediment_monitor.config import PipelineConfig
from sediment_monitor.models import BatchResult
from sediment_monitor.components import (
    DuckDBCalibrationResolver,
    ParquetReadingSource,
    ReadingProcessor
)
from sediment_monitor.utils import get_logger, setup_logging, PipelineError

DEFAULT_CONFIG_PATH = Path("config/default.yaml")


class SedimentMonitoringPipeline:
    """Pipeline orchestrator that coordinates ingestion and processing."""

    def __init__(self, config: PipelineConfig):
        """
        Initialize pipeline with configuration.

        Args:
            config: Pipeline configuration loaded from YAML
        """
        self.config = config
        self.logger = get_logger(__name__)

        # Components are injected (dependency injection pattern)
        self.source: Optional[ParquetReadingSource] = None
        self.processor: Optional[ReadingProcessor] = None

    def set_components(self, source: ParquetReadingSource, processor: ReadingProcessor):
        """
        Set pipeline components (dependency injection).

        Args:
            source: Raw reading source
            processor: Reading processor
        """
        self.source = source
        self.processor = processor

    def execute(self, input_path: Optional[Path] = None, write_output: bool = True) -> BatchResult:
        """
        Execute the batch pipeline.

        Args:
            input_path: Optional specific raw reading file
            write_output: Whether to write processed readings to the processed data directory

        Returns:
            Pipeline execution results
        """
        start_time = time.time()
        errors = []

        try:
            if not all([self.source, self.processor]):
                raise ValueError("All pipeline components must be set before execution")

            self.logger.info(f"Starting pipeline: {self.config.pipeline.name}")

            self.logger.info("Step 1: Raw Reading Ingestion")
            raw_data = self.source.execute(input_path)

            self.logger.info("Step 2: Reading Processing")
            processed = self.processor.execute(raw_data)

            output_path = None
            if write_output and not processed.empty:
                self.logger.info("Step 3: Writing Processed Readings")
                output_path = self._write_output(processed)

            return BatchResult(
                success=True,
                records_processed=len(processed),
                outliers_flagged=int(processed["is_outlier"].sum()) if not processed.empty else 0,
                sensors_seen=sorted(int(s) for s in processed["sensor_id"].unique()),
                output_path=str(output_path) if output_path else None,
                execution_time_seconds=time.time() - start_time,
                errors=errors
            )

        except (PipelineError, ValueError, OSError) as e:
            error_msg = f"Pipeline execution failed: {str(e)}"
            errors.append(error_msg)
            self.logger.error(error_msg)

            return BatchResult(
                success=False,
                records_processed=0,
                execution_time_seconds=time.time() - start_time,
                errors=errors
            )

    def _write_output(self, processed) -> Path:
        """Write processed readings to a timestamped Parquet file."""
        output_dir = Path(self.config.paths.data_processed)
        output_dir.mkdir(parents=True, exist_ok=True)

        output_path = output_dir / f"processed_{time.strftime('%Y%m%dT%H%M%S')}.parquet"
        processed.to_parquet(output_path, index=False, engine="pyarrow")

        self.logger.info(f"Wrote {len(processed)} processed readings to {output_path}")
        return output_path


def build_pipeline(config: PipelineConfig) -> SedimentMonitoringPipeline:
    """Wire the default components: Parquet source, DuckDB calibration store, processor."""
    resolver = DuckDBCalibrationResolver(config.paths.calibration_db, config.calibration)
    resolver.ensure_schema()

    pipeline = SedimentMonitoringPipeline(config)
    pipeline.set_components(ParquetReadingSource(config), ReadingProcessor(config, resolver))
    return pipeline


def main(argv=None):
    """Main entry point for pipeline execution."""
    parser = argparse.ArgumentParser(description="Process raw sediment monitoring readings")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to YAML configuration")
    parser.add_argument("--input", type=Path, default=None, help="Process a single raw reading Parquet file")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    parser.add_argument("--no-output", action="store_true", help="Do not write processed readings")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = get_logger(__name__)

    config = PipelineConfig.from_yaml(args.config)
    pipeline = build_pipeline(config)
    try:
        result = pipeline.execute(args.input, write_output=not args.no_output)
    finally:
        pipeline.processor.close()

    logger.info("Pipeline Execution Summary:")
    logger.info(f"   Success: {result.success}")
    logger.info(f"   Records processed: {result.records_processed}")
    logger.info(f"   Outliers flagged: {result.outliers_flagged}")
    logger.info(f"   Sensors: {result.sensors_seen}")
    logger.info(f"   Execution time: {result.execution_time_seconds:.2f} seconds")
    if result.output_path:
        logger.info(f"   Output: {result.output_path}")
    if result.errors:
        logger.error(f"   Errors: {', '.join(result.errors)}")

    return 0 if result.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
