# ------------------------------------------------------------------------------
# Main Script for the Bear Detection API
# main.py
# ------------------------------------------------------------------------------
import json
import os

from config import get_config
config = get_config()
from logging_config import get_logger
logger = get_logger(__name__)

# --------------------------------------------------------------------------
# Configuration Parameters
# --------------------------------------------------------------------------
_debug = config["DEBUG_MODE"]
output_dir = config["OUTPUT_DIR"]

logger.info(f"Debug mode is {'enabled' if _debug else 'disabled'}.")
logger.info(f"Configuration: {json.dumps(config, indent=2, ensure_ascii=False)}")

os.makedirs(output_dir, exist_ok=True)

# -----------------------------
# Build the Pipeline Components
# -----------------------------
from detectors.services import ClassificationService, PersistenceService

classifier = ClassificationService()
store = PersistenceService()

if not classifier.url:
    logger.warning(
        "CLASSIFIER_URL is not set; every submission will fail with "
        "classification_failure until it is configured."
    )

# -----------------------------
# Import and Run the Web Interface
# -----------------------------
from web.web_interface import create_web_interface

# Expose the Flask server as the WSGI app.
app = create_web_interface(classifier=classifier, store=store)

if __name__ == "__main__":
    app.run(
        host=config["API_HOST"],
        port=config["API_PORT"],
        debug=_debug,
        threaded=True,
    )
