"""
Detection Pipeline Services.

This package contains concrete implementations of the pipeline interfaces.
Each service encapsulates a specific responsibility and can be tested independently.

ARCHITECTURE:
- Services implement interfaces from detectors/interfaces/
- Services may use utils/ for low-level operations
- core/submission_core orchestrates these services
"""

from detectors.services.classification_service import ClassificationService
from detectors.services.persistence_service import PersistenceService

__all__ = [
    "ClassificationService",
    "PersistenceService",
]
