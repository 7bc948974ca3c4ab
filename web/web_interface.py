# ------------------------------------------------------------------------------
# web_interface.py
# ------------------------------------------------------------------------------

from flask import Flask
from flask_cors import CORS

from config import get_config
from core.submission_core import SubmissionService
from detectors.interfaces import ClassificationInterface, PersistenceInterface
from logging_config import get_logger

logger = get_logger(__name__)


def create_web_interface(
    classifier: ClassificationInterface,
    store: PersistenceInterface,
    submission_service: SubmissionService | None = None,
) -> Flask:
    """
    Creates and returns the Flask server exposing the detection API.

    Args:
        classifier: Gateway to the external classifier.
        store: Detection store shared by submissions and read endpoints.
        submission_service: Optional prebuilt service (tests inject one with
            a fixed clock). Built from classifier and store if omitted.

    Returns:
        Flask application with the /api blueprint registered.
    """
    from web.blueprints.api import api

    config = get_config()

    server = Flask(__name__)
    # Uploads beyond the limit are rejected before the body is read.
    # Multipart framing adds a little overhead on top of the image itself.
    server.config["MAX_CONTENT_LENGTH"] = config["MAX_UPLOAD_BYTES"] + 64 * 1024
    server.json.ensure_ascii = False

    origins = config["CORS_ORIGINS"]
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(server, resources={r"/api/*": {"origins": origins}})

    api.submission_service = submission_service or SubmissionService(
        classifier=classifier, store=store
    )
    api.store = store
    server.register_blueprint(api)

    logger.info(
        f"Detection API ready (default location {config['DEFAULT_LOCATION']!r}, "
        f"timestamps from {config['DETECTED_AT_SOURCE']}, "
        f"statistics in {config['STATS_TIMEZONE']})"
    )
    return server
