"""
Database connection management and initialization.

SQLite through SQLAlchemy. Predicates arrive with ``?`` placeholders, so
statements are executed with the driver's qmark paramstyle.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine

from tagstore.config import get_settings

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Global engine instance
_engine: Engine | None = None
_DB_PATH: Path | None = None


def get_db_path() -> Path:
    """Get the SQLite database file path."""
    global _DB_PATH
    if _DB_PATH is None:
        _DB_PATH = Path(get_settings().db_path)
        _DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    return _DB_PATH


def set_db_path(path: Path | str) -> None:
    """Set a custom database path (useful for testing)."""
    global _DB_PATH, _engine
    _DB_PATH = Path(path)
    _engine = None  # Reset engine when path changes


def _configure_connection(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    # Open result cursors must not block writers
    cursor.execute("PRAGMA journal_mode = WAL")
    cursor.close()


def get_engine() -> Engine:
    """Get SQLAlchemy engine for database operations."""
    global _engine
    if _engine is None:
        db_path = get_db_path()
        _engine = create_engine(
            f"sqlite:///{db_path}",
            echo=get_settings().echo_sql,
            connect_args={"check_same_thread": False},
        )
        event.listen(_engine, "connect", _configure_connection)
        logger.debug("Created engine for %s", db_path)
    return _engine


def reset_engine() -> None:
    """Dispose and forget the engine (useful for testing or reconfiguration)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


@contextmanager
def get_db() -> Generator[Connection, None, None]:
    """Get a database connection.

    Usage:
        with get_db() as conn:
            result = conn.execute(text("SELECT * FROM ndef_msgs"))
            rows = result.fetchall()
    """
    with get_engine().connect() as conn:
        yield conn


class ConnectionProvider:
    """Hands out one connection per call.

    Holds no connection between calls; pooling belongs to the engine.
    """

    def __init__(self, engine: Engine | None = None):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine if self._engine is not None else get_engine()

    @contextmanager
    def get_readable(self) -> Generator[Connection, None, None]:
        with self.engine.connect() as conn:
            yield conn

    @contextmanager
    def get_writable(self) -> Generator[Connection, None, None]:
        with self.engine.connect() as conn:
            yield conn


def init_db() -> None:
    """Initialize database schema.

    Creates all tables if they don't exist and stamps the schema version.
    Safe to call multiple times.
    """
    engine = get_engine()

    raw_conn = engine.raw_connection()
    try:
        cursor = raw_conn.cursor()
        cursor.execute("PRAGMA user_version")
        current_version = cursor.fetchone()[0]
        cursor.close()

        raw_conn.executescript(_SCHEMA)
        if current_version < SCHEMA_VERSION:
            raw_conn.executescript(f"PRAGMA user_version = {SCHEMA_VERSION};")
            logger.info("Schema initialized at version %d", SCHEMA_VERSION)
        else:
            logger.info("Database schema is up-to-date (version %d)", current_version)
        raw_conn.commit()
    finally:
        raw_conn.close()


# =============================================================================
# Database Schema (SQLite)
# =============================================================================

_SCHEMA = """
-- =============================================================================
-- NDEF MESSAGES
-- =============================================================================

CREATE TABLE IF NOT EXISTS ndef_msgs (
    _id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    bytes BLOB,                         -- Raw NDEF message
    date INTEGER,                       -- Milliseconds since epoch
    starred INTEGER NOT NULL DEFAULT 0
);

-- =============================================================================
-- NDEF RECORDS
-- =============================================================================
-- Individual records of a stored message

CREATE TABLE IF NOT EXISTS ndef_records (
    _id INTEGER PRIMARY KEY AUTOINCREMENT,
    message_id INTEGER,
    tnf INTEGER,                        -- Type name format
    type BLOB,
    payload BLOB,
    position INTEGER,                   -- Index of the record in its message

    FOREIGN KEY (message_id) REFERENCES ndef_msgs(_id) ON DELETE CASCADE
);

-- =============================================================================
-- NDEF TAGS
-- =============================================================================
-- Physical tags a message was read from

CREATE TABLE IF NOT EXISTS ndef_tags (
    _id INTEGER PRIMARY KEY AUTOINCREMENT,
    tag_id BLOB UNIQUE,                 -- Hardware identifier of the tag
    message_id INTEGER,
    date INTEGER,

    FOREIGN KEY (message_id) REFERENCES ndef_msgs(_id) ON DELETE SET NULL
);

-- =============================================================================
-- INDEXES
-- =============================================================================

CREATE INDEX IF NOT EXISTS idx_msgs_date ON ndef_msgs(date);
CREATE INDEX IF NOT EXISTS idx_msgs_starred ON ndef_msgs(starred);
CREATE INDEX IF NOT EXISTS idx_records_message ON ndef_records(message_id, position);
CREATE INDEX IF NOT EXISTS idx_tags_message ON ndef_tags(message_id);
"""


def _table_names(conn: Connection) -> list[str]:
    result = conn.execute(text(
        "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
    ))
    return [row[0] for row in result.fetchall()]


def reset_db() -> None:
    """Drop all tables and recreate schema. USE WITH CAUTION."""
    with get_db() as conn:
        for table in _table_names(conn):
            conn.execute(text(f"DROP TABLE IF EXISTS {table}"))
        conn.commit()

    # Recreate schema
    init_db()


def get_table_stats() -> dict[str, int]:
    """Get row counts for all tables (useful for diagnostics)."""
    with get_db() as conn:
        stats = {}
        for table in _table_names(conn):
            result = conn.execute(text(f"SELECT COUNT(*) as count FROM {table}"))
            stats[table] = result.fetchone()[0]

        return stats


if __name__ == "__main__":
    print(f"Initializing database at {get_db_path()}")
    init_db()
    for table, count in sorted(get_table_stats().items()):
        print(f"  {table}: {count} rows")
