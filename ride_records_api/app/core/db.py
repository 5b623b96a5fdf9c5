"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations when the relational
backend is opened (``init_db``).  It uses SQLite as a lightweight
embedded database; to switch to another DBMS you would replace the
connection logic and adapt SQL syntax accordingly.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Tuple

# Each entry is (version, script).  Append new migrations with an
# incremented version number; never edit one that has shipped.
MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        -- AUTOINCREMENT keeps ids of deleted rides from being handed out again.
        CREATE TABLE IF NOT EXISTS rides (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            start_lat REAL NOT NULL,
            start_long REAL NOT NULL,
            end_lat REAL NOT NULL,
            end_long REAL NOT NULL,
            rider_name TEXT NOT NULL,
            driver_name TEXT NOT NULL,
            driver_vehicle TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Return an absolute path for ``database_url``.

    Relative paths are resolved against the current working directory.
    ``:memory:`` is not supported because every call opens its own
    connection.
    """
    if os.path.isabs(database_url):
        return database_url
    return os.path.abspath(database_url)


def get_connection(db_path: str, timeout: float = 30.0) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name.  No
    type detection is enabled; timestamps come back as the ISO strings
    they were stored as.
    """
    conn = sqlite3.connect(db_path, timeout=timeout)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: str, timeout: float = 30.0) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(db_path, timeout)
    try:
        yield conn.cursor()
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: str, timeout: float = 30.0) -> int:
    """Create the database if needed and apply pending migrations.

    Returns the schema version after migrating.
    """
    with get_cursor(db_path, timeout) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    return current_version
