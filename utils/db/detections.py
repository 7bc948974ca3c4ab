"""
Detection Event Insert and Query Operations.

This module handles the append and recent-history queries on the
detection_events table.
"""

import sqlite3
from typing import Any


def insert_detection_event(conn: sqlite3.Connection, row: dict[str, Any]) -> int:
    """Inserts a detection event and returns its ID."""
    cur = conn.execute(
        """
        INSERT INTO detection_events (
            location,
            detected_at,
            bear_detected,
            confidence,
            model_id
        ) VALUES (?, ?, ?, ?, ?);
        """,
        (
            row["location"],
            row["detected_at"],
            1 if row["bear_detected"] else 0,
            row["confidence"],
            row.get("model_id") or "",
        ),
    )
    conn.commit()
    return cur.lastrowid


def fetch_recent_detection_events(
    conn: sqlite3.Connection, limit: int
) -> list[sqlite3.Row]:
    """
    Returns the newest detection events first.
    Ties on detected_at are ordered by the most recently appended id.
    """
    cur = conn.execute(
        """
        SELECT id, location, detected_at, bear_detected, confidence, model_id
        FROM detection_events
        ORDER BY detected_at DESC, id DESC
        LIMIT ?
        """,
        (limit,),
    )
    return cur.fetchall()
