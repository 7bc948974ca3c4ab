"""
Detection API Blueprint Tests.

These tests verify that the /api endpoints return the documented envelope:
a "success" flag, and on failure an error "kind" and "message".
"""

import io
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from conftest import FakeClassifier, FixedClock
from core.submission_core import SubmissionService
from detectors.interfaces import ClassificationFailure, UnavailableError, Verdict
from web.web_interface import create_web_interface

_TEST_CONFIG = {
    "DEBUG_MODE": False,
    "DEFAULT_LOCATION": "台東縣",
    "DETECTED_AT_SOURCE": "server",
    "STATS_TIMEZONE": "Asia/Taipei",
    "CAPTURE_MAX_SKEW_SECONDS": 300,
    "RECENT_DEFAULT_LIMIT": 10,
    "MAX_UPLOAD_BYTES": 1024 * 1024,
    "CORS_ORIGINS": "*",
}


@pytest.fixture
def classifier():
    return FakeClassifier(Verdict(bear_detected=True, confidence=0.85, model_id="bear-v1"))


@pytest.fixture
def app(classifier, store):
    """Create the Flask app with a fake classifier and a temp store."""
    with patch("web.web_interface.get_config", return_value=_TEST_CONFIG), patch(
        "web.blueprints.api.get_config", return_value=_TEST_CONFIG
    ), patch("core.analytics_core.get_config", return_value=_TEST_CONFIG):
        service = SubmissionService(
            classifier=classifier,
            store=store,
            default_location="台東縣",
            detected_at_source="server",
            timezone_name="Asia/Taipei",
            max_upload_bytes=1024 * 1024,
            clock=FixedClock(datetime(2025, 6, 18, 2, 30, tzinfo=UTC)),
        )
        app = create_web_interface(
            classifier=classifier, store=store, submission_service=service
        )
        app.config["TESTING"] = True
        yield app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


def _upload(client, payload, **form):
    data = {"image": (io.BytesIO(payload), "trail-cam.png"), **form}
    return client.post("/api/detect", data=data, content_type="multipart/form-data")


class TestDetect:
    """Test POST /api/detect."""

    def test_successful_detection(self, client, png_bytes):
        response = _upload(client, png_bytes, location="台東縣海端鄉")

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["bear_detected"] is True
        assert data["confidence"] == pytest.approx(0.85)
        assert data["detection"]["location"] == "台東縣海端鄉"
        assert data["detection"]["model_id"] == "bear-v1"
        assert data["detection"]["detected_at"].startswith("2025-06-18T02:30:00")

    def test_default_location(self, client, png_bytes):
        response = _upload(client, png_bytes)

        assert response.get_json()["detection"]["location"] == "台東縣"

    def test_missing_image_is_invalid_input(self, client):
        response = client.post(
            "/api/detect", data={"location": "台東縣"}, content_type="multipart/form-data"
        )

        assert response.status_code == 400
        data = response.get_json()
        assert data["success"] is False
        assert data["error"]["kind"] == "invalid_input"
        assert data["error"]["message"]

    def test_unreadable_image_is_invalid_input(self, client, classifier):
        response = _upload(client, b"GIF89a-not-really")

        assert response.status_code == 400
        assert response.get_json()["error"]["kind"] == "invalid_input"
        assert classifier.calls == 0

    def test_classification_failure_is_not_a_negative_verdict(self, client, classifier, png_bytes):
        classifier.error = ClassificationFailure("Classifier timed out", reason="timeout")

        response = _upload(client, png_bytes)

        assert response.status_code == 502
        data = response.get_json()
        assert data["success"] is False
        assert "bear_detected" not in data
        assert data["error"]["kind"] == "classification_failure"
        assert data["error"]["reason"] == "timeout"

    def test_persistence_failure_carries_verdict(self, client, store, png_bytes):
        with patch.object(store, "append", side_effect=UnavailableError("disk full")):
            response = _upload(client, png_bytes, location="台東縣延平鄉")

        assert response.status_code == 503
        data = response.get_json()
        assert data["success"] is False
        assert data["error"]["kind"] == "persistence_failure"
        assert data["verdict"]["bear_detected"] is True
        assert data["verdict"]["confidence"] == pytest.approx(0.85)
        assert data["pending"]["location"] == "台東縣延平鄉"

    def test_unexpected_error_is_internal_error(self, app, client, png_bytes):
        with patch.object(
            app.blueprints["api"].submission_service, "submit", side_effect=KeyError("db-secret-path")
        ):
            response = _upload(client, png_bytes)

        assert response.status_code == 500
        error = response.get_json()["error"]
        assert error["kind"] == "internal_error"
        assert "db-secret-path" not in error["message"]
        assert "KeyError" not in error["message"]

    def test_cors_header_present(self, client, png_bytes):
        response = _upload(client, png_bytes)

        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/detect",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] in (
            "*",
            "http://localhost:5173",
        )
        assert "POST" in response.headers["Access-Control-Allow-Methods"]

    def test_cors_restricted_origins(self, classifier, store):
        config = {**_TEST_CONFIG, "CORS_ORIGINS": "https://bears.example.org"}
        with patch("web.web_interface.get_config", return_value=config):
            app = create_web_interface(
                classifier=classifier,
                store=store,
                submission_service=SubmissionService(
                    classifier=classifier, store=store, default_location="台東縣"
                ),
            )
        client = app.test_client()

        allowed = client.get(
            "/api/recent-detections",
            headers={"Origin": "https://bears.example.org"},
        )
        denied = client.get(
            "/api/recent-detections", headers={"Origin": "https://evil.example.com"}
        )

        assert allowed.headers["Access-Control-Allow-Origin"] == "https://bears.example.org"
        assert "Access-Control-Allow-Origin" not in denied.headers


class TestStatistics:
    """Test GET /api/statistics."""

    def test_empty_statistics(self, client):
        response = client.get("/api/statistics")

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["statistics"] == {
            "total_detections": 0,
            "bear_detections": 0,
            "daily_stats": [],
            "location_stats": [],
            "timezone": "Asia/Taipei",
        }

    def test_statistics_after_submission(self, client, png_bytes):
        _upload(client, png_bytes, location="台東縣海端鄉")

        stats = client.get("/api/statistics").get_json()["statistics"]

        assert stats["total_detections"] == 1
        assert stats["bear_detections"] == 1
        assert stats["daily_stats"] == [{"date": "2025-06-18", "count": 1}]
        assert stats["location_stats"] == [{"location": "台東縣海端鄉", "count": 1}]

    def test_store_unavailable(self, client, store):
        with patch.object(store, "fetch_summary", side_effect=UnavailableError("locked")):
            response = client.get("/api/statistics")

        assert response.status_code == 503
        data = response.get_json()
        assert data["success"] is False
        assert data["error"]["kind"] == "unavailable"


class TestRecentDetections:
    """Test GET /api/recent-detections."""

    def test_default_limit(self, client, png_bytes):
        for _ in range(12):
            _upload(client, png_bytes)

        data = client.get("/api/recent-detections").get_json()

        assert data["success"] is True
        assert len(data["detections"]) == 10

    def test_newest_first(self, client, png_bytes):
        _upload(client, png_bytes, location="台東縣海端鄉")
        _upload(client, png_bytes, location="台東縣延平鄉")

        detections = client.get("/api/recent-detections?limit=1").get_json()["detections"]

        assert len(detections) == 1
        assert detections[0]["location"] == "台東縣延平鄉"

    def test_empty_store(self, client):
        data = client.get("/api/recent-detections?limit=10").get_json()

        assert data == {"success": True, "detections": []}

    @pytest.mark.parametrize("limit", ["0", "-3", "abc"])
    def test_invalid_limit(self, client, limit):
        response = client.get(f"/api/recent-detections?limit={limit}")

        assert response.status_code == 400
        assert response.get_json()["error"]["kind"] == "invalid_input"

    def test_store_unavailable(self, client, store):
        with patch.object(store, "fetch_recent", side_effect=UnavailableError("locked")):
            response = client.get("/api/recent-detections")

        assert response.status_code == 503
        assert response.get_json()["error"]["kind"] == "unavailable"
