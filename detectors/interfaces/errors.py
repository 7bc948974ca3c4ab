"""
Pipeline Errors - Typed Failures of the Detection Pipeline.

Every failure the pipeline reports carries a machine-readable ``kind`` and
the HTTP status the API layer answers with. A failure is never turned into
a default verdict or empty result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from detectors.interfaces.classification import Verdict
    from detectors.interfaces.persistence import PendingDetection


class DetectionPipelineError(Exception):
    """Base class for all errors surfaced by the detection pipeline."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class InvalidInput(DetectionPipelineError):
    """Malformed or empty submission, or an invalid query parameter."""

    kind = "invalid_input"
    status_code = 400


class ClassificationFailure(DetectionPipelineError):
    """
    The classifier gateway could not produce a verdict.

    Attributes:
        reason: One of "timeout", "unavailable" or "malformed_response".
    """

    kind = "classification_failure"
    status_code = 502

    def __init__(self, message: str, reason: str = "unavailable"):
        super().__init__(message)
        self.reason = reason

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["reason"] = self.reason
        return payload


class PersistenceFailure(DetectionPipelineError):
    """
    Classification succeeded but the event could not be stored.

    Carries the pending detection so persistence can be retried without
    classifying the image again.
    """

    kind = "persistence_failure"
    status_code = 503

    def __init__(self, message: str, pending: PendingDetection):
        super().__init__(message)
        self.pending = pending

    @property
    def verdict(self) -> Verdict:
        return self.pending.verdict


class UnavailableError(DetectionPipelineError):
    """The detection store could not be read or written."""

    kind = "unavailable"
    status_code = 503
