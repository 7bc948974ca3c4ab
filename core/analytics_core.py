"""
Analytics Core - Statistics Aggregation Logic.

Derives the statistics snapshot from the detection store. Nothing is
cached: every call reads the store afresh.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pytz

from config import get_config
from detectors.interfaces import PersistenceInterface, StoreSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyCount:
    date: date
    count: int


@dataclass(frozen=True)
class LocationCount:
    location: str
    count: int


@dataclass
class StatisticsSnapshot:
    """
    Point-in-time statistics over all detection events.

    Attributes:
        total_detections: Count of all events.
        bear_detections: Count of events with a positive verdict.
        daily_stats: One entry per calendar day with events, oldest first.
        location_stats: One entry per distinct location string.
        timezone: Reference zone used for the daily buckets.
    """

    total_detections: int = 0
    bear_detections: int = 0
    daily_stats: list[DailyCount] = field(default_factory=list)
    location_stats: list[LocationCount] = field(default_factory=list)
    timezone: str = "UTC"

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_detections": self.total_detections,
            "bear_detections": self.bear_detections,
            "daily_stats": [
                {"date": entry.date.isoformat(), "count": entry.count}
                for entry in self.daily_stats
            ],
            "location_stats": [
                {"location": entry.location, "count": entry.count}
                for entry in self.location_stats
            ],
            "timezone": self.timezone,
        }


def build_statistics(summary: StoreSummary, timezone_name: str) -> StatisticsSnapshot:
    """
    Builds a statistics snapshot from raw store aggregates.

    Days are calendar dates in ``timezone_name``; days without events are
    omitted. Locations are kept exactly as stored, so "台東縣海端鄉" and
    "台東縣 海端鄉" count as different places.

    Args:
        summary: Aggregates read in one store transaction.
        timezone_name: pytz zone name for day bucketing.

    Returns:
        StatisticsSnapshot
    """
    tz = pytz.timezone(timezone_name)
    per_day = Counter(ts.astimezone(tz).date() for ts in summary.detection_times)

    snapshot = StatisticsSnapshot(
        total_detections=summary.total_detections,
        bear_detections=summary.bear_detections,
        daily_stats=[DailyCount(day, per_day[day]) for day in sorted(per_day)],
        location_stats=[
            LocationCount(location, count)
            for location, count in summary.location_counts
        ],
        timezone=timezone_name,
    )

    if sum(entry.count for entry in snapshot.daily_stats) != snapshot.total_detections:
        logger.error(
            "Daily buckets do not add up to the total; "
            "store returned an inconsistent summary"
        )
    return snapshot


def compute_statistics(
    store: PersistenceInterface, timezone_name: str | None = None
) -> StatisticsSnapshot:
    """
    Computes fresh statistics from the current store contents.

    Raises:
        UnavailableError: If the store cannot be read.
    """
    timezone_name = timezone_name or get_config()["STATS_TIMEZONE"]
    return build_statistics(store.fetch_summary(), timezone_name)
