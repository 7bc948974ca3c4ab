"""
Analytics Database Operations.

This module handles the aggregate queries behind the statistics dashboard.
Callers wanting a consistent snapshot run these inside one read transaction.
"""

import sqlite3


def fetch_detection_totals(conn: sqlite3.Connection) -> tuple[int, int]:
    """
    Returns (total_detections, bear_detections).
    """
    row = conn.execute("""
        SELECT
            COUNT(*) AS total,
            COALESCE(SUM(bear_detected), 0) AS bears
        FROM detection_events
        """).fetchone()
    return (row["total"] or 0, row["bears"] or 0)


def fetch_location_counts(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    """
    Returns one row per distinct location with its event count.
    Locations are grouped by exact string match.
    """
    cur = conn.execute("""
        SELECT location, COUNT(*) AS count
        FROM detection_events
        GROUP BY location
        ORDER BY count DESC, location ASC
        """)
    return cur.fetchall()


def fetch_all_detection_times(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    """
    Returns detected_at of all events, oldest first.
    Day bucketing happens in the caller's reference time zone.
    """
    cur = conn.execute("""
        SELECT detected_at
        FROM detection_events
        ORDER BY detected_at ASC
        """)
    return cur.fetchall()
