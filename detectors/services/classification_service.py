"""
Classification Service - Remote Bear Classifier Gateway.

Implements ClassificationInterface on top of an HTTP classification
endpoint. The service is stateless: one request per image, no retries.
"""

import requests

from config import get_config
from detectors.interfaces.classification import (
    ClassificationInterface,
    Verdict,
    check_verdict,
)
from detectors.interfaces.errors import ClassificationFailure
from logging_config import get_logger

logger = get_logger(__name__)


def parse_verdict(payload) -> Verdict:
    """
    Validates a classifier JSON payload and converts it to a Verdict.

    Raises:
        ClassificationFailure: With reason "malformed_response" if the
            payload does not carry a boolean verdict and a confidence in
            [0.0, 1.0].
    """
    if not isinstance(payload, dict):
        raise ClassificationFailure(
            "Classifier response is not a JSON object", reason="malformed_response"
        )

    bear_detected = payload.get("bear_detected")
    confidence = check_verdict(bear_detected, payload.get("confidence"))

    model_id = payload.get("model_id") or ""
    return Verdict(
        bear_detected=bear_detected,
        confidence=confidence,
        model_id=str(model_id),
    )


class ClassificationService(ClassificationInterface):
    """
    Sends images to the external classifier and returns its verdict.

    Features:
    - Multipart upload of the raw image bytes
    - Per-request timeout
    - Strict response validation
    - Every failure mode surfaced as ClassificationFailure
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the classification service.

        Args:
            url: Classifier endpoint. Defaults to CLASSIFIER_URL.
            timeout: Request timeout in seconds. Defaults to CLASSIFIER_TIMEOUT.
            session: Optional requests session (connection pooling, tests).
        """
        cfg = get_config()
        self._url = url if url is not None else cfg["CLASSIFIER_URL"]
        self._timeout = timeout if timeout is not None else cfg["CLASSIFIER_TIMEOUT"]
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    def classify(self, image_bytes: bytes) -> Verdict:
        """
        Classifies an encoded image via the remote classifier.

        Args:
            image_bytes: PNG or JPEG payload.

        Returns:
            Verdict exactly as reported by the classifier.
        """
        if not self._url:
            raise ClassificationFailure(
                "Classifier endpoint is not configured (CLASSIFIER_URL)",
                reason="unavailable",
            )

        files = {"image": ("upload", image_bytes, "application/octet-stream")}
        try:
            response = self._session.post(
                self._url, files=files, timeout=self._timeout
            )
        except requests.Timeout as e:
            logger.error(f"Classifier timed out after {self._timeout}s: {e}")
            raise ClassificationFailure(
                f"Classifier did not answer within {self._timeout} seconds",
                reason="timeout",
            ) from e
        except requests.RequestException as e:
            logger.error(f"Classifier request failed: {e}")
            raise ClassificationFailure(
                f"Classifier is unavailable: {e}", reason="unavailable"
            ) from e

        if not response.ok:
            logger.error(f"Classifier returned HTTP {response.status_code}")
            raise ClassificationFailure(
                f"Classifier returned HTTP {response.status_code}",
                reason="unavailable",
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Classifier returned a non-JSON body: {e}")
            raise ClassificationFailure(
                "Classifier response is not valid JSON", reason="malformed_response"
            ) from e

        verdict = parse_verdict(payload)
        logger.debug(
            f"Classifier verdict: bear_detected={verdict.bear_detected} "
            f"confidence={verdict.confidence:.3f}"
        )
        return verdict
