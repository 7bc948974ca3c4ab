"""
Detection Pipeline Interfaces.

This package defines the abstract interfaces for the components of the
detection pipeline. These interfaces enable:
- Clear service boundaries
- Dependency injection
- Independent testing of each component

ARCHITECTURE:
- core/submission_core only coordinates these interfaces
- Concrete implementations live in services/
- No direct dependencies between implementations
"""

from detectors.interfaces.classification import (
    ClassificationInterface,
    Verdict,
    check_verdict,
)
from detectors.interfaces.errors import (
    ClassificationFailure,
    DetectionPipelineError,
    InvalidInput,
    PersistenceFailure,
    UnavailableError,
)
from detectors.interfaces.persistence import (
    DetectionEvent,
    PendingDetection,
    PersistenceInterface,
    StoreSummary,
)

__all__ = [
    # Interfaces
    "ClassificationInterface",
    "PersistenceInterface",
    # Data Classes
    "Verdict",
    "PendingDetection",
    "DetectionEvent",
    "StoreSummary",
    # Errors
    "DetectionPipelineError",
    "InvalidInput",
    "ClassificationFailure",
    "PersistenceFailure",
    "UnavailableError",
    # Validation
    "check_verdict",
]
