"""
Tests for the recent-history provider.
"""

from datetime import UTC, datetime, timedelta

import pytest

from conftest import FakeClassifier
from core.detections_core import parse_limit, recent_detections
from core.submission_core import SubmissionService
from detectors.interfaces import InvalidInput, PendingDetection, UnavailableError, Verdict


def _append(store, at, location="台東縣海端鄉"):
    return store.append(
        PendingDetection(
            location=location,
            detected_at=at,
            verdict=Verdict(bear_detected=True, confidence=0.9),
        )
    )


class TestOrdering:
    def test_descending_by_detected_at(self, store):
        base = datetime(2025, 6, 18, 0, 0, tzinfo=UTC)
        for minutes in (10, 50, 30, 20, 40):
            _append(store, base + timedelta(minutes=minutes))

        events = recent_detections(store, 10)

        times = [e.detected_at for e in events]
        assert times == sorted(times, reverse=True)

    def test_same_millisecond_orders_higher_id_first(self, store, clock, png_bytes):
        service = SubmissionService(
            classifier=FakeClassifier(), store=store, clock=clock
        )
        first = service.submit(png_bytes, location="台東縣海端鄉")
        second = service.submit(png_bytes, location="台東縣延平鄉")
        assert first.detected_at == second.detected_at

        events = recent_detections(store, 10)

        assert [e.id for e in events] == [second.id, first.id]

    def test_length_is_min_of_limit_and_total(self, store):
        base = datetime(2025, 6, 18, 0, 0, tzinfo=UTC)
        for minutes in range(3):
            _append(store, base + timedelta(minutes=minutes))

        assert len(recent_detections(store, 2)) == 2
        assert len(recent_detections(store, 10)) == 3

    def test_repeated_reads_are_identical(self, store):
        base = datetime(2025, 6, 18, 0, 0, tzinfo=UTC)
        for minutes in range(4):
            _append(store, base + timedelta(minutes=minutes))

        assert recent_detections(store, 3) == recent_detections(store, 3)

    def test_empty_store(self, store):
        assert recent_detections(store, 10) == []

    def test_large_limit_returns_every_event(self, store):
        base = datetime(2025, 6, 18, 0, 0, tzinfo=UTC)
        for minutes in range(120):
            _append(store, base + timedelta(minutes=minutes))

        events = recent_detections(store, 150)

        assert len(events) == 120
        assert events[0].detected_at == base + timedelta(minutes=119)

    def test_unavailable_store(self, unavailable_store):
        with pytest.raises(UnavailableError):
            recent_detections(unavailable_store, 10)


class TestLimitValidation:
    @pytest.mark.parametrize("limit", [0, -1, "0", "-5", "ten", "", "1.5", True, 2.0, None])
    def test_invalid_limits_rejected(self, store, limit):
        with pytest.raises(InvalidInput):
            recent_detections(store, limit)

    @pytest.mark.parametrize("raw, expected", [(1, 1), ("10", 10), (" 3 ", 3)])
    def test_valid_limits(self, raw, expected):
        assert parse_limit(raw) == expected
