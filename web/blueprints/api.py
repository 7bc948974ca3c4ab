"""
Detection API Blueprint.

Handles the detection routes:
- POST /api/detect - Classify an uploaded image and record the detection
- GET /api/statistics - Totals, daily and per-location counts
- GET /api/recent-detections - Newest detections first

Every response carries a "success" flag. Failures add an "error" object
with a machine-readable "kind" and a human-readable "message".
"""

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_config
from core import analytics_core, detections_core
from detectors.interfaces import (
    DetectionPipelineError,
    InvalidInput,
    PersistenceFailure,
)
from logging_config import get_logger

logger = get_logger(__name__)

# Create Blueprint
api = Blueprint("api", __name__, url_prefix="/api")

# Wired by create_web_interface() (or by tests).
api.submission_service = None
api.store = None


def _error_response(error: DetectionPipelineError):
    payload = {"success": False, "error": error.to_dict()}
    if isinstance(error, PersistenceFailure):
        pending = error.pending
        payload["verdict"] = error.verdict.to_dict()
        payload["pending"] = {
            "location": pending.location,
            "detected_at": pending.detected_at.isoformat(),
            **error.verdict.to_dict(),
        }
    return jsonify(payload), error.status_code


def _internal_error(e: Exception):
    logger.error(f"Unexpected API error: {e}", exc_info=True)
    payload = {
        "success": False,
        "error": {
            "kind": "internal_error",
            "message": "An unexpected error occurred, see server log",
        },
    }
    return jsonify(payload), 500


@api.app_errorhandler(RequestEntityTooLarge)
def upload_too_large(e):
    limit = get_config()["MAX_UPLOAD_BYTES"]
    payload = {
        "success": False,
        "error": {
            "kind": InvalidInput.kind,
            "message": f"upload exceeds {limit} bytes",
        },
    }
    return jsonify(payload), 413


# =============================================================================
# Submission
# =============================================================================


@api.route("/detect", methods=["POST"])
def detect():
    """Classify an uploaded image and record the detection."""
    try:
        upload = request.files.get("image")
        if upload is None:
            raise InvalidInput("image file is required (multipart field 'image')")

        event = api.submission_service.submit(
            upload.read(),
            location=request.form.get("location"),
            captured_at=request.form.get("captured_at"),
        )
    except DetectionPipelineError as e:
        return _error_response(e)
    except RequestEntityTooLarge:
        raise
    except Exception as e:
        return _internal_error(e)

    return jsonify(
        {
            "success": True,
            "bear_detected": event.bear_detected,
            "confidence": event.confidence,
            "detection": event.to_dict(),
        }
    )


# =============================================================================
# Statistics & History
# =============================================================================


@api.route("/statistics", methods=["GET"])
def statistics():
    try:
        snapshot = analytics_core.compute_statistics(api.store)
    except DetectionPipelineError as e:
        return _error_response(e)
    except Exception as e:
        return _internal_error(e)
    return jsonify({"success": True, "statistics": snapshot.to_dict()})


@api.route("/recent-detections", methods=["GET"])
def recent_detections():
    cfg = get_config()
    try:
        events = detections_core.recent_detections(
            api.store,
            request.args.get("limit", cfg["RECENT_DEFAULT_LIMIT"]),
        )
    except DetectionPipelineError as e:
        return _error_response(e)
    except Exception as e:
        return _internal_error(e)
    return jsonify(
        {"success": True, "detections": [event.to_dict() for event in events]}
    )
