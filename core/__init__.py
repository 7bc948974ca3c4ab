"""
BearWatch Core Package.

This package contains the core business logic of the application,
separated from the web layer. Submission, statistics and history
operations are coordinated through core modules.

ARCHITECTURE RULES:
- core/ modules may only import from:
  - Python standard library
  - utils/ (image and database helpers)
  - detectors/ (pipeline interfaces and services)
  - config, logging_config (for global configuration)

- core/ modules MUST NOT import from:
  - web/ (no Flask dependencies)
  - flask, werkzeug, or any web-specific packages

- All new business logic should be placed here, not in web/
"""

__all__ = [
    "analytics_core",
    "detections_core",
    "submission_core",
]
