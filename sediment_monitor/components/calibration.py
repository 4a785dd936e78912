"""
Calibration resolvers for sensor readings.

Calibration rows are written by an external calibration workflow and never
updated; a resolver always picks the most recently created row for a sensor
and falls back to the identity calibration (offset 0, scale 1) only when the
sensor has no rows at all. Failures to read the store are raised, never
replaced by defaults.
"""

import re
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional
import duckdb

from sediment_monitor.components.base import CalibrationResolver
from sediment_monitor.config import CalibrationSettings
from sediment_monitor.models import CalibrationParameters
from sediment_monitor.utils import get_logger, CalibrationError, CalibrationTimeoutError

logger = get_logger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

CALIBRATION_COLUMNS = [
    "sensor_id",
    "parameter",
    "offset_value",
    "scale_factor",
    "last_calibration",
    "next_calibration",
    "calibration_formula",
    "created_at",
]


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC so DuckDB TIMESTAMP columns compare consistently."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class DuckDBCalibrationResolver(CalibrationResolver):
    """Reads calibration rows from a DuckDB table."""

    def __init__(self, database: str = ":memory:", settings: Optional[CalibrationSettings] = None):
        """
        Args:
            database: DuckDB database file, or ':memory:'
            settings: Calibration store settings (table name, default parameter)
        """
        self.settings = settings or CalibrationSettings()
        if not _IDENTIFIER.match(self.settings.table):
            raise CalibrationError(f"Invalid calibration table name: {self.settings.table!r}")

        self.table = self.settings.table
        self.database = database
        if database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(database)

    def ensure_schema(self) -> None:
        """Create the calibration table if it does not exist yet."""
        self.conn.execute(f"CREATE SEQUENCE IF NOT EXISTS {self.table}_id_seq")
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                id BIGINT PRIMARY KEY DEFAULT nextval('{self.table}_id_seq'),
                sensor_id BIGINT NOT NULL,
                parameter VARCHAR NOT NULL,
                offset_value DOUBLE DEFAULT 0,
                scale_factor DOUBLE DEFAULT 1,
                last_calibration TIMESTAMP,
                next_calibration TIMESTAMP,
                calibration_formula VARCHAR,
                created_at TIMESTAMP NOT NULL
            )
            """
        )

    def record(self, params: CalibrationParameters) -> CalibrationParameters:
        """
        Insert a calibration row.

        Args:
            params: Calibration to store; created_at defaults to now (UTC)

        Returns:
            The stored calibration, with created_at filled in
        """
        created_at = _naive_utc(params.created_at) or _naive_utc(datetime.now(timezone.utc))
        stored = params.model_copy(update={"created_at": created_at})

        try:
            self.conn.execute(
                f"INSERT INTO {self.table} ({', '.join(CALIBRATION_COLUMNS)}) "
                f"VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    stored.sensor_id,
                    stored.parameter,
                    stored.offset_value,
                    stored.scale_factor,
                    _naive_utc(stored.last_calibration),
                    _naive_utc(stored.next_calibration),
                    stored.calibration_formula,
                    created_at,
                ],
            )
        except duckdb.Error as e:
            raise CalibrationError(
                f"Failed to store calibration for sensor {params.sensor_id}: {e}",
                sensor_id=params.sensor_id
            ) from e

        logger.info(
            f"Stored {stored.parameter} calibration for sensor {stored.sensor_id}: "
            f"scale_factor={stored.scale_factor}, offset_value={stored.offset_value}"
        )
        return stored

    def resolve(self, sensor_id: int) -> CalibrationParameters:
        # A cursor per lookup lets resolve() run on a worker thread
        cursor = self.conn.cursor()
        try:
            row = cursor.execute(
                f"SELECT {', '.join(CALIBRATION_COLUMNS)} FROM {self.table} "
                f"WHERE sensor_id = ? ORDER BY created_at DESC, id DESC LIMIT 1",
                [sensor_id],
            ).fetchone()
        except duckdb.Error as e:
            raise CalibrationError(
                f"Calibration lookup failed for sensor {sensor_id}: {e}", sensor_id=sensor_id
            ) from e
        finally:
            cursor.close()

        if row is None:
            logger.info(f"No calibration found for sensor {sensor_id}, using identity calibration")
            return CalibrationParameters.identity(sensor_id, self.settings.default_parameter)

        return CalibrationParameters(**dict(zip(CALIBRATION_COLUMNS, row)))

    def close(self) -> None:
        self.conn.close()


class InMemoryCalibrationResolver(CalibrationResolver):
    """List-backed resolver for simulations and tests."""

    def __init__(self, rows: Optional[Iterable[CalibrationParameters]] = None, default_parameter: str = "depth"):
        self.rows: List[CalibrationParameters] = list(rows or [])
        self.default_parameter = default_parameter

    def record(self, params: CalibrationParameters) -> CalibrationParameters:
        stored = params
        if stored.created_at is None:
            stored = params.model_copy(update={"created_at": datetime.now(timezone.utc)})
        self.rows.append(stored)
        return stored

    def resolve(self, sensor_id: int) -> CalibrationParameters:
        candidates = [
            (index, row) for index, row in enumerate(self.rows) if row.sensor_id == sensor_id
        ]
        if not candidates:
            logger.info(f"No calibration found for sensor {sensor_id}, using identity calibration")
            return CalibrationParameters.identity(sensor_id, self.default_parameter)

        # Rows without created_at sort first; insertion order breaks ties
        _, latest = max(
            candidates,
            key=lambda item: (item[1].created_at is not None, _naive_utc(item[1].created_at) or datetime.min, item[0])
        )
        return latest


def resolve_with_timeout(
    resolver: CalibrationResolver,
    sensor_id: int,
    timeout: float,
    executor: Optional[ThreadPoolExecutor] = None
) -> CalibrationParameters:
    """
    Run a calibration lookup bounded by a timeout.

    A lookup that times out is abandoned, not interrupted: its worker thread
    keeps running until the resolver returns. Pass a long-lived executor to
    reuse worker threads across lookups; without one, a single-use executor is
    created and shut down without waiting.

    Args:
        resolver: Calibration source
        sensor_id: Sensor identifier
        timeout: Seconds to wait for the lookup
        executor: Executor to run the lookup on

    Returns:
        Resolved calibration

    Raises:
        CalibrationTimeoutError: If the lookup did not finish in time
        CalibrationError: If the lookup failed for any other reason
    """
    owns_executor = executor is None
    if owns_executor:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="calibration")

    future = executor.submit(resolver.resolve, sensor_id)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        future.cancel()
        raise CalibrationTimeoutError(
            f"Calibration lookup for sensor {sensor_id} timed out after {timeout}s", sensor_id=sensor_id
        ) from e
    except CalibrationError:
        raise
    except Exception as e:
        raise CalibrationError(
            f"Calibration lookup failed for sensor {sensor_id}: {e}", sensor_id=sensor_id
        ) from e
    finally:
        if owns_executor:
            executor.shutdown(wait=False)
