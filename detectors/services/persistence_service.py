"""
Persistence Service - Detection Event Storage.

Implements PersistenceInterface on the SQLite detection store.
"""

import sqlite3
import threading
from pathlib import Path

from detectors.interfaces.errors import UnavailableError
from detectors.interfaces.persistence import (
    DetectionEvent,
    PendingDetection,
    PersistenceInterface,
    StoreSummary,
)
from logging_config import get_logger
from utils.db import (
    closing_connection,
    fetch_all_detection_times,
    fetch_detection_totals,
    fetch_location_counts,
    fetch_recent_detection_events,
    format_timestamp,
    insert_detection_event,
    parse_timestamp,
)

logger = get_logger(__name__)


def _row_to_event(row: sqlite3.Row) -> DetectionEvent:
    return DetectionEvent(
        id=row["id"],
        location=row["location"],
        detected_at=parse_timestamp(row["detected_at"]),
        bear_detected=bool(row["bear_detected"]),
        confidence=float(row["confidence"]),
        model_id=row["model_id"] or "",
    )


class PersistenceService(PersistenceInterface):
    """
    Append-only SQLite store for detection events.

    Features:
    - Appends serialised by a lock on top of SQLite's own write lock
    - Ids from AUTOINCREMENT, never reused
    - Reads run in one transaction for a point-in-time view
    """

    def __init__(self, db_path: str | Path | None = None):
        """
        Initialize the persistence service.

        Args:
            db_path: SQLite file. Defaults to OUTPUT_DIR/DB_FILENAME.
        """
        self._db_path = Path(db_path) if db_path is not None else None
        self._write_lock = threading.Lock()

    def append(self, pending: PendingDetection) -> DetectionEvent:
        verdict = pending.verdict
        row = {
            "location": pending.location,
            "detected_at": format_timestamp(pending.detected_at),
            "bear_detected": verdict.bear_detected,
            "confidence": verdict.confidence,
            "model_id": verdict.model_id,
        }
        try:
            with self._write_lock:
                with closing_connection(self._db_path) as conn:
                    event_id = insert_detection_event(conn, row)
        except sqlite3.Error as e:
            logger.error(f"Detection store append failed: {e}")
            raise UnavailableError(f"Detection store append failed: {e}") from e

        logger.debug(f"Stored detection event {event_id}")
        return DetectionEvent(
            id=event_id,
            location=pending.location,
            detected_at=parse_timestamp(row["detected_at"]),
            bear_detected=verdict.bear_detected,
            confidence=verdict.confidence,
            model_id=verdict.model_id,
        )

    def fetch_recent(self, limit: int) -> list[DetectionEvent]:
        try:
            with closing_connection(self._db_path) as conn:
                rows = fetch_recent_detection_events(conn, limit)
        except sqlite3.Error as e:
            logger.error(f"Detection store read failed: {e}")
            raise UnavailableError(f"Detection store is unavailable: {e}") from e
        return [_row_to_event(row) for row in rows]

    def fetch_summary(self) -> StoreSummary:
        try:
            with closing_connection(self._db_path) as conn:
                # One read transaction so all aggregates see the same rows.
                conn.execute("BEGIN")
                total, bears = fetch_detection_totals(conn)
                locations = fetch_location_counts(conn)
                times = fetch_all_detection_times(conn)
        except sqlite3.Error as e:
            logger.error(f"Detection store read failed: {e}")
            raise UnavailableError(f"Detection store is unavailable: {e}") from e

        return StoreSummary(
            total_detections=total,
            bear_detections=bears,
            location_counts=[(row["location"], row["count"]) for row in locations],
            detection_times=[parse_timestamp(row["detected_at"]) for row in times],
        )
