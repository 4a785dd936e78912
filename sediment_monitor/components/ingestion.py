"""
Raw reading ingestion for batch pipeline runs.

Reads Parquet files of raw sensor readings from the raw data directory, checks
each file's columns with DuckDB before loading it, and returns the readings
ordered by sensor and capture time.
"""

from pathlib import Path
from typing import List, Optional
import duckdb
import pandas as pd

from sediment_monitor.components.base import IngestionComponent
from sediment_monitor.config import PipelineConfig
from sediment_monitor.utils import get_logger, IngestionError


class ParquetReadingSource(IngestionComponent):
    """Loads raw sensor readings from Parquet files."""

    def __init__(self, config: PipelineConfig):
        """
        Initialize ingestion component.

        Args:
            config: Pipeline configuration
        """
        super().__init__(config)
        self.logger = get_logger(__name__)
        self.duckdb_conn = duckdb.connect(':memory:')

        self.stats = {
            "files_discovered": 0,
            "files_processed": 0,
            "files_skipped": 0,
            "records_ingested": 0,
        }

    def execute(self, data_path: Optional[Path] = None) -> pd.DataFrame:
        """
        Ingest raw readings.

        Args:
            data_path: Optional specific file path to read instead of the raw directory

        Returns:
            Raw readings ordered by sensor_id and captured_at

        Raises:
            IngestionError: If the raw directory is missing or reading fails
        """
        try:
            self.logger.info("Starting raw reading ingestion")

            if data_path:
                files_to_process = [Path(data_path)]
                self.logger.info(f"Processing specific file: {data_path}")
            else:
                files_to_process = self._discover_files()

            self.stats["files_discovered"] = len(files_to_process)

            frames = []
            for file_path in files_to_process:
                frame = self._read_file(file_path)
                if frame is None or frame.empty:
                    self.stats["files_skipped"] += 1
                    self.logger.warning(f"Skipped {file_path.name}: no valid readings")
                    continue

                frames.append(frame)
                self.stats["files_processed"] += 1
                self.stats["records_ingested"] += len(frame)
                self.logger.info(f"Loaded {file_path.name}: {len(frame)} readings")

            if frames:
                combined = pd.concat(frames, ignore_index=True)
                combined = combined.sort_values(["sensor_id", "captured_at"], kind="stable").reset_index(drop=True)
            else:
                combined = pd.DataFrame(columns=self.config.data_schema.expected_columns)
                self.logger.warning("No readings were ingested")

            self._log_ingestion_summary()
            return combined

        except IngestionError:
            raise
        except Exception as e:
            self.logger.error(f"Ingestion failed: {str(e)}")
            raise IngestionError(f"Raw reading ingestion failed: {str(e)}") from e

    def _discover_files(self) -> List[Path]:
        """Find Parquet files in the raw data directory."""
        raw_data_path = Path(self.config.paths.data_raw)

        if not raw_data_path.exists():
            raise IngestionError(f"Raw data directory does not exist: {raw_data_path}")

        files = sorted(raw_data_path.glob("*.parquet"))
        if not files:
            self.logger.warning(f"No parquet files found in {raw_data_path}")
        return files

    def _read_file(self, file_path: Path) -> Optional[pd.DataFrame]:
        """
        Read one Parquet file after checking its columns.

        Args:
            file_path: Path to the Parquet file

        Returns:
            DataFrame with the file's readings, or None if the file is unusable
        """
        try:
            rel = self.duckdb_conn.read_parquet(file_path.as_posix())
        except duckdb.Error as e:
            self.logger.error(f"Error reading {file_path.name}: {e}")
            return None

        actual_cols = list(rel.columns)
        expected_cols = list(self.config.data_schema.expected_columns)

        missing = [c for c in expected_cols if c not in actual_cols]
        extra = [c for c in actual_cols if c not in expected_cols]
        if missing or extra:
            self.logger.error(
                f"{file_path.name} schema mismatch. Missing: {missing or []}, Extra: {extra or []}"
            )
            return None

        return rel.df()[expected_cols]

    def _log_ingestion_summary(self) -> None:
        """Log ingestion statistics."""
        self.logger.info("=== Ingestion Summary ===")
        for key, value in self.stats.items():
            self.logger.info(f"{key.replace('_', ' ').title()}: {value}")
