"""
Shared fixtures for the detection pipeline tests.

Provides in-memory image payloads, a temporary SQLite store and a
scriptable fake classifier.
"""

import io
from datetime import UTC, datetime, timedelta

import piexif
import pytest
from PIL import Image

from detectors.interfaces import ClassificationInterface, Verdict
from detectors.services import PersistenceService


def make_image_bytes(fmt: str = "PNG", exif: bytes | None = None) -> bytes:
    """Encodes a small solid-colour image."""
    buf = io.BytesIO()
    img = Image.new("RGB", (32, 24), color=(34, 85, 34))
    if exif is not None:
        img.save(buf, format=fmt, exif=exif)
    else:
        img.save(buf, format=fmt)
    return buf.getvalue()


def make_jpeg_with_capture_time(capture_time: str) -> bytes:
    """JPEG carrying EXIF DateTimeOriginal ("YYYY:MM:DD HH:MM:SS")."""
    exif_dict = {"0th": {}, "Exif": {}, "GPS": {}}
    exif_dict["Exif"][piexif.ExifIFD.DateTimeOriginal] = capture_time
    return make_image_bytes("JPEG", exif=piexif.dump(exif_dict))


class FakeClassifier(ClassificationInterface):
    """
    Classifier double that returns a fixed verdict or raises an error.
    """

    def __init__(self, verdict: Verdict | None = None, error: Exception | None = None):
        self.verdict = verdict or Verdict(bear_detected=True, confidence=0.85)
        self.error = error
        self.calls = 0

    def classify(self, image_bytes: bytes) -> Verdict:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.verdict


class FixedClock:
    """Clock returning a settable instant; advance() moves it forward."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 6, 18, 2, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def store(tmp_path) -> PersistenceService:
    """Detection store backed by a fresh SQLite file."""
    return PersistenceService(db_path=tmp_path / "detections.db")


@pytest.fixture
def unavailable_store(tmp_path) -> PersistenceService:
    """Store pointed at a directory, so every connection attempt fails."""
    return PersistenceService(db_path=tmp_path)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()
