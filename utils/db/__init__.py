"""
BearWatch Database Module.

This package provides modular database access for the detection store.
All functions are re-exported here.

Usage:
    from utils.db import get_connection, insert_detection_event
    # or
    from utils.db.detections import insert_detection_event
"""

# Analytics Operations
from utils.db.analytics import (
    fetch_all_detection_times,
    fetch_detection_totals,
    fetch_location_counts,
)

# Connection and Schema
from utils.db.connection import (
    TIMESTAMP_FORMAT,
    _get_db_path,
    _init_schema,
    closing_connection,
    format_timestamp,
    get_connection,
    parse_timestamp,
)

# Detection Operations
from utils.db.detections import (
    fetch_recent_detection_events,
    insert_detection_event,
)

__all__ = [
    # Connection
    "TIMESTAMP_FORMAT",
    "_get_db_path",
    "_init_schema",
    "closing_connection",
    "get_connection",
    "format_timestamp",
    "parse_timestamp",
    # Detections
    "insert_detection_event",
    "fetch_recent_detection_events",
    # Analytics
    "fetch_detection_totals",
    "fetch_location_counts",
    "fetch_all_detection_times",
]
