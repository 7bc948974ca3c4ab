"""
Database Connection and Schema Management.

This module handles SQLite connection creation and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

from config import get_config

# Fixed-width UTC text so that lexical order equals chronological order.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"

# Module-level cache: initialize schema once per database path.
# Tests point the store at temporary files, so this is keyed by db path.
_schema_initialized_paths: set[Path] = set()


def _get_db_path() -> Path:
    cfg = get_config()
    output_dir = Path(cfg["OUTPUT_DIR"])
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / cfg["DB_FILENAME"]


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    global _schema_initialized_paths
    db_path = Path(db_path) if db_path is not None else _get_db_path()
    conn = sqlite3.connect(db_path, timeout=10.0, check_same_thread=False)
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        if db_path not in _schema_initialized_paths:
            _init_schema(conn)
            _schema_initialized_paths.add(db_path)
    except Exception:
        conn.close()
        raise
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def closing_connection(db_path: Path | None = None):
    """Context manager that creates a DB connection and guarantees it is closed.

    IMPORTANT: `with sqlite3.Connection as conn:` only manages transactions
    (commit/rollback); it does NOT call conn.close(). This context manager
    ensures the file descriptor is released when the block exits.

    Usage:
        with closing_connection() as conn:
            conn.execute("SELECT ...")
    """
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def format_timestamp(value: datetime) -> str:
    """Normalises an aware datetime to the stored UTC text form."""
    if value.tzinfo is None:
        raise ValueError("detected_at must be timezone-aware")
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value).astimezone(UTC)


def _init_schema(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS detection_events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            location TEXT NOT NULL CHECK (length(location) > 0),
            detected_at TEXT NOT NULL,
            bear_detected INTEGER NOT NULL CHECK (bear_detected IN (0, 1)),
            confidence REAL NOT NULL CHECK (confidence >= 0.0 AND confidence <= 1.0),
            model_id TEXT NOT NULL DEFAULT '',
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """)
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_detection_events_recent "
        "ON detection_events(detected_at DESC, id DESC);"
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_detection_events_location "
        "ON detection_events(location);"
    )

    # Events are append-only. Deletion stays possible for retention jobs.
    conn.execute("""
        CREATE TRIGGER IF NOT EXISTS detection_events_immutable
        BEFORE UPDATE ON detection_events
        BEGIN
            SELECT RAISE(ABORT, 'detection events are immutable');
        END;
        """)

    conn.commit()
