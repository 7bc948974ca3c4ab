"""
Classification Interface - Bear Presence Classification.

Defines the contract for the external image classifier.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from detectors.interfaces.errors import ClassificationFailure


@dataclass(frozen=True)
class Verdict:
    """
    Result of a classification operation.

    Attributes:
        bear_detected: Whether the classifier reports a bear in the image.
        confidence: Classification confidence (0.0 to 1.0).
        model_id: Identifier of the model used, if the classifier reports one.
    """

    bear_detected: bool
    confidence: float
    model_id: str = ""

    def to_dict(self) -> dict:
        return {
            "bear_detected": self.bear_detected,
            "confidence": self.confidence,
            "model_id": self.model_id,
        }


def check_verdict(bear_detected, confidence) -> float:
    """
    Validates a reported verdict and returns the confidence as a float.

    Raises:
        ClassificationFailure: With reason "malformed_response" unless
            bear_detected is a bool and confidence a number in [0.0, 1.0].
    """
    if not isinstance(bear_detected, bool):
        raise ClassificationFailure(
            "Classifier response has no boolean 'bear_detected'",
            reason="malformed_response",
        )
    # bool is an int subclass; a boolean confidence is a malformed response.
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ClassificationFailure(
            "Classifier response has no numeric 'confidence'",
            reason="malformed_response",
        )
    confidence = float(confidence)
    if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
        raise ClassificationFailure(
            f"Classifier confidence {confidence} outside [0.0, 1.0]",
            reason="malformed_response",
        )
    return confidence


class ClassificationInterface(ABC):
    """
    Interface for the classifier gateway.

    Implementations own their timeout handling and must raise
    ClassificationFailure instead of returning a negative verdict when the
    classifier cannot answer.
    """

    @abstractmethod
    def classify(self, image_bytes: bytes) -> Verdict:
        """
        Classifies an encoded PNG or JPEG image.

        Args:
            image_bytes: Raw image payload as uploaded.

        Returns:
            Verdict taken verbatim from the classifier.

        Raises:
            ClassificationFailure: On timeout, unavailability or a malformed
                classifier response.
        """
        pass
