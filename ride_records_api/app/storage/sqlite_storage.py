"""
Relational ride backend on top of SQLite.

Rides live in the ``rides`` table with snake_case columns.  Ids come
from SQLite's ``AUTOINCREMENT`` so allocation is atomic at the storage
layer and an id is never handed out twice.  Every call opens its own
connection (see ``core.db``); each statement that mutates a row is a
single ``UPDATE``/``DELETE`` so readers only ever see the state before
or after it.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from pydantic import ValidationError

from ..core.db import get_cursor, init_db, resolve_database_path
from ..core.errors import StorageUnavailableError
from ..schemas.ride import Ride, RideInput
from .base import RideStorage

logger = logging.getLogger(__name__)

RIDE_COLUMNS = (
    "id, start_lat, start_long, end_lat, end_long, "
    "rider_name, driver_name, driver_vehicle, created_at, updated_at"
)


class SQLiteRideStorage(RideStorage):
    """Ride store backed by a SQLite database file."""

    name = "sqlite"

    def __init__(self, database_url: str, timeout: float = 30.0):
        self.db_path = resolve_database_path(database_url)
        self.timeout = timeout
        try:
            version = init_db(self.db_path, self.timeout)
        except sqlite3.Error as exc:
            logger.exception("Could not initialise ride database at %s", self.db_path)
            raise StorageUnavailableError(f"Could not open ride database: {exc}") from exc
        logger.info("SQLite ride storage ready at %s (schema v%s)", self.db_path, version)

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        try:
            with get_cursor(self.db_path, self.timeout) as cursor:
                yield cursor
        except sqlite3.Error as exc:
            logger.exception("SQLite ride storage failure")
            raise StorageUnavailableError(f"Ride database error: {exc}") from exc

    @staticmethod
    def _row_to_ride(row: sqlite3.Row) -> Ride:
        try:
            return Ride(
                id=row["id"],
                start_lat=row["start_lat"],
                start_long=row["start_long"],
                end_lat=row["end_lat"],
                end_long=row["end_long"],
                rider_name=row["rider_name"],
                driver_name=row["driver_name"],
                driver_vehicle=row["driver_vehicle"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
        except ValidationError as exc:
            raise StorageUnavailableError(f"Corrupted ride row {row['id']}") from exc

    @staticmethod
    def _select_by_id(cursor: sqlite3.Cursor, ride_id: int) -> Optional[sqlite3.Row]:
        return cursor.execute(
            f"SELECT {RIDE_COLUMNS} FROM rides WHERE id = ?", (ride_id,)
        ).fetchone()

    def insert(self, data: RideInput, timestamp: datetime) -> Ride:
        stamp = timestamp.isoformat()
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO rides (start_lat, start_long, end_lat, end_long,
                                   rider_name, driver_name, driver_vehicle,
                                   created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data.start_lat,
                    data.start_long,
                    data.end_lat,
                    data.end_long,
                    data.rider_name,
                    data.driver_name,
                    data.driver_vehicle,
                    stamp,
                    stamp,
                ),
            )
            row = self._select_by_id(cursor, cursor.lastrowid)
        return self._row_to_ride(row)

    def list_all(self) -> List[Ride]:
        with self._cursor() as cursor:
            rows = cursor.execute(f"SELECT {RIDE_COLUMNS} FROM rides ORDER BY id ASC").fetchall()
        return [self._row_to_ride(row) for row in rows]

    def list_window(self, offset: int, limit: int) -> List[Ride]:
        if limit <= 0:
            return []
        with self._cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {RIDE_COLUMNS} FROM rides ORDER BY id ASC LIMIT ? OFFSET ?",
                (limit, max(offset, 0)),
            ).fetchall()
        return [self._row_to_ride(row) for row in rows]

    def get_by_id(self, ride_id: int) -> Optional[Ride]:
        with self._cursor() as cursor:
            row = self._select_by_id(cursor, ride_id)
        return self._row_to_ride(row) if row else None

    def update_by_id(self, ride_id: int, data: RideInput, timestamp: datetime) -> Optional[Ride]:
        with self._cursor() as cursor:
            cursor.execute(
                """
                UPDATE rides
                   SET start_lat = ?, start_long = ?, end_lat = ?, end_long = ?,
                       rider_name = ?, driver_name = ?, driver_vehicle = ?,
                       updated_at = ?
                 WHERE id = ?
                """,
                (
                    data.start_lat,
                    data.start_long,
                    data.end_lat,
                    data.end_long,
                    data.rider_name,
                    data.driver_name,
                    data.driver_vehicle,
                    timestamp.isoformat(),
                    ride_id,
                ),
            )
            if cursor.rowcount == 0:
                return None
            row = self._select_by_id(cursor, ride_id)
        return self._row_to_ride(row)

    def delete_by_id(self, ride_id: int) -> bool:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM rides WHERE id = ?", (ride_id,))
            deleted = cursor.rowcount > 0
        return deleted

    def count_all(self) -> int:
        with self._cursor() as cursor:
            row = cursor.execute("SELECT COUNT(*) AS total FROM rides").fetchone()
        return int(row["total"])
