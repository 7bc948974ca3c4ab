"""
Persistence Interface - Detection Event Storage.

Defines the append-only contract for the detection store and the records
that flow through it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from detectors.interfaces.classification import Verdict


@dataclass(frozen=True)
class PendingDetection:
    """
    A classified detection that has not been stored yet.

    Attributes:
        location: Free-text place label.
        detected_at: Timezone-aware detection timestamp.
        verdict: Classifier verdict to record.
    """

    location: str
    detected_at: datetime
    verdict: Verdict


@dataclass(frozen=True)
class DetectionEvent:
    """
    One recorded outcome of classifying a single submitted image.

    Events are immutable once written.
    """

    id: int
    location: str
    detected_at: datetime
    bear_detected: bool
    confidence: float
    model_id: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "location": self.location,
            "detected_at": self.detected_at.isoformat(),
            "bear_detected": self.bear_detected,
            "confidence": self.confidence,
            "model_id": self.model_id,
        }


@dataclass
class StoreSummary:
    """
    Raw aggregates read from the store in a single read transaction.

    Attributes:
        total_detections: Count of all events.
        bear_detections: Count of events with a positive verdict.
        location_counts: (location, count) for every distinct location.
        detection_times: detected_at of every event, timezone-aware UTC.
    """

    total_detections: int = 0
    bear_detections: int = 0
    location_counts: list[tuple[str, int]] = field(default_factory=list)
    detection_times: list[datetime] = field(default_factory=list)


class PersistenceInterface(ABC):
    """
    Interface for the detection store.

    Implementations must:
    - assign unique, increasing ids under concurrent appends
    - make append all-or-nothing
    - raise UnavailableError when the store cannot be reached
    """

    @abstractmethod
    def append(self, pending: PendingDetection) -> DetectionEvent:
        """
        Stores a detection and returns it with its assigned id.

        Args:
            pending: Fully classified detection.

        Returns:
            The stored DetectionEvent.
        """
        pass

    @abstractmethod
    def fetch_recent(self, limit: int) -> list[DetectionEvent]:
        """
        Returns up to ``limit`` events, newest first.

        Ordered by detected_at descending, ties broken by id descending.
        """
        pass

    @abstractmethod
    def fetch_summary(self) -> StoreSummary:
        """
        Returns totals, per-location counts and all detection times as one
        point-in-time snapshot.
        """
        pass
