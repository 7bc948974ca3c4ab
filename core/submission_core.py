"""
Submission Core - Detection Submission Pipeline.

Validates an uploaded image, asks the classifier gateway for a verdict and
appends the resulting detection event to the store.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytz

from config import get_config
from detectors.interfaces import (
    ClassificationFailure,
    ClassificationInterface,
    DetectionEvent,
    InvalidInput,
    PendingDetection,
    PersistenceFailure,
    PersistenceInterface,
    Verdict,
    check_verdict,
)
from logging_config import get_logger
from utils.image_ops import identify_image_format, read_capture_time

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SubmissionService:
    """
    Turns an uploaded image into a recorded detection event.

    The classifier's boolean verdict is authoritative; confidence is
    recorded as reported and never used as a local gate.
    """

    def __init__(
        self,
        classifier: ClassificationInterface,
        store: PersistenceInterface,
        default_location: str | None = None,
        detected_at_source: str | None = None,
        timezone_name: str | None = None,
        max_upload_bytes: int | None = None,
        capture_max_skew_seconds: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the submission service.

        Args:
            classifier: Gateway to the external classifier.
            store: Detection store to append to.
            default_location: Used when a submission carries no location.
            detected_at_source: "server" (arrival time) or "capture"
                (client-supplied or EXIF capture time, server time fallback).
            timezone_name: Zone for naive capture times.
            max_upload_bytes: Largest accepted image payload.
            capture_max_skew_seconds: How far a capture time may lie in the
                future before it is rejected.
            clock: Returns the current aware datetime. Defaults to UTC now.
        """
        cfg = get_config()
        self._classifier = classifier
        self._store = store
        self._default_location = default_location or cfg["DEFAULT_LOCATION"]
        self._detected_at_source = detected_at_source or cfg["DETECTED_AT_SOURCE"]
        self._tz = pytz.timezone(timezone_name or cfg["STATS_TIMEZONE"])
        self._max_upload_bytes = max_upload_bytes or cfg["MAX_UPLOAD_BYTES"]
        self._max_skew = timedelta(
            seconds=capture_max_skew_seconds or cfg["CAPTURE_MAX_SKEW_SECONDS"]
        )
        self._clock = clock or _utc_now

    def submit(
        self,
        image_bytes: bytes,
        location: str | None = None,
        captured_at: str | datetime | None = None,
    ) -> DetectionEvent:
        """
        Classifies an image and records the detection.

        Args:
            image_bytes: PNG or JPEG payload.
            location: Place label. Blank or missing uses the default location.
            captured_at: Optional camera capture time, only honoured when
                detected_at_source is "capture".

        Returns:
            The stored DetectionEvent.

        Raises:
            InvalidInput: Empty, oversized or unreadable image, or a bad
                capture time. Raised before the classifier is called.
            ClassificationFailure: The classifier gave no usable verdict.
                Nothing is stored.
            PersistenceFailure: The verdict could not be stored. Carries the
                pending detection for a persistence-only retry.
        """
        resolved_location = self._resolve_location(location)
        self._validate_image(image_bytes)
        capture_time = self._resolve_capture_time(image_bytes, captured_at)

        verdict = self._classify(image_bytes)

        pending = PendingDetection(
            location=resolved_location,
            detected_at=capture_time or self._clock(),
            verdict=verdict,
        )
        return self.record(pending)

    def record(self, pending: PendingDetection) -> DetectionEvent:
        """
        Appends an already classified detection to the store.

        Used by submit() and to retry persistence after a PersistenceFailure
        without classifying the image again.
        """
        try:
            event = self._store.append(pending)
        except Exception as e:
            logger.error(
                f"Could not store detection at {pending.location!r} "
                f"(bear_detected={pending.verdict.bear_detected}): {e}"
            )
            raise PersistenceFailure(
                f"Detection was classified but could not be stored: {e}", pending
            ) from e

        logger.info(
            f"Detection {event.id} recorded at {event.location!r}: "
            f"bear_detected={event.bear_detected} confidence={event.confidence:.2f}"
        )
        return event

    def _resolve_location(self, location) -> str:
        if location is None:
            return self._default_location
        if not isinstance(location, str):
            raise InvalidInput("location must be a string")
        location = location.strip()
        return location or self._default_location

    def _validate_image(self, image_bytes) -> None:
        if not isinstance(image_bytes, (bytes, bytearray)):
            raise InvalidInput("image must be raw bytes")
        if len(image_bytes) == 0:
            logger.warning("Rejected submission with an empty image payload")
            raise InvalidInput("image payload is empty")
        if len(image_bytes) > self._max_upload_bytes:
            logger.warning(f"Rejected {len(image_bytes)} byte image payload")
            raise InvalidInput(
                f"image payload exceeds {self._max_upload_bytes} bytes"
            )
        try:
            identify_image_format(bytes(image_bytes))
        except ValueError as e:
            logger.warning(f"Rejected submission: {e}")
            raise InvalidInput(str(e)) from e

    def _resolve_capture_time(
        self, image_bytes: bytes, captured_at: str | datetime | None
    ) -> datetime | None:
        if self._detected_at_source != "capture":
            return None

        if captured_at is not None and captured_at != "":
            capture_time = self._parse_captured_at(captured_at)
        else:
            exif_time = read_capture_time(bytes(image_bytes))
            capture_time = self._localize(exif_time) if exif_time else None

        if capture_time is None:
            return None
        if capture_time - self._clock() > self._max_skew:
            raise InvalidInput(
                f"capture time {capture_time.isoformat()} lies in the future"
            )
        return capture_time

    def _parse_captured_at(self, captured_at: str | datetime) -> datetime:
        if isinstance(captured_at, datetime):
            return self._localize(captured_at)
        try:
            parsed = datetime.fromisoformat(str(captured_at).strip())
        except ValueError as e:
            raise InvalidInput(
                f"captured_at {captured_at!r} is not an ISO-8601 timestamp"
            ) from e
        return self._localize(parsed)

    def _localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return self._tz.localize(value)
        return value

    def _classify(self, image_bytes: bytes) -> Verdict:
        try:
            verdict = self._classifier.classify(bytes(image_bytes))
        except ClassificationFailure as e:
            logger.error(f"Classification failed ({e.reason}): {e.message}")
            raise
        except Exception as e:
            logger.error(f"Classification failed: {e}", exc_info=True)
            raise ClassificationFailure(f"Classifier error: {e}") from e

        if not isinstance(verdict, Verdict):
            raise ClassificationFailure(
                "Classifier returned no verdict", reason="malformed_response"
            )
        check_verdict(verdict.bear_detected, verdict.confidence)
        return verdict
