# config.py
import logging
import os

import pytz
from dotenv import load_dotenv

# Load environment variables from .env file.
load_dotenv()

logger = logging.getLogger(__name__)

DETECTED_AT_SOURCES = ("server", "capture")

_DEFAULTS = {
    "OUTPUT_DIR": "output",
    "DB_FILENAME": "detections.db",
    "DEFAULT_LOCATION": "台東縣",
    "CLASSIFIER_TIMEOUT": 20.0,
    "STATS_TIMEZONE": "Asia/Taipei",
    "DETECTED_AT_SOURCE": "server",
    "CAPTURE_MAX_SKEW_SECONDS": 300,
    "RECENT_DEFAULT_LIMIT": 10,
    "MAX_UPLOAD_BYTES": 10 * 1024 * 1024,
    "API_HOST": "127.0.0.1",
    "API_PORT": 5000,
}

_config: dict | None = None


def _positive_number(name: str, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return _DEFAULTS[name]
    try:
        value = cast(float(raw))
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}, using default {_DEFAULTS[name]}")
        return _DEFAULTS[name]
    if value <= 0:
        logger.warning(f"{name} must be positive, using default {_DEFAULTS[name]}")
        return _DEFAULTS[name]
    return value


def _timezone_name() -> str:
    name = os.getenv("STATS_TIMEZONE", _DEFAULTS["STATS_TIMEZONE"]).strip()
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning(
            f"Unknown STATS_TIMEZONE {name!r}, using {_DEFAULTS['STATS_TIMEZONE']}"
        )
        return _DEFAULTS["STATS_TIMEZONE"]
    return name


def _detected_at_source() -> str:
    source = os.getenv("DETECTED_AT_SOURCE", _DEFAULTS["DETECTED_AT_SOURCE"])
    source = source.strip().lower()
    if source not in DETECTED_AT_SOURCES:
        logger.warning(
            f"Unknown DETECTED_AT_SOURCE {source!r}, "
            f"using {_DEFAULTS['DETECTED_AT_SOURCE']}"
        )
        return _DEFAULTS["DETECTED_AT_SOURCE"]
    return source


def load_config():
    """
    Loads configuration from environment variables and returns a dictionary.
    """
    default_location = os.getenv("DEFAULT_LOCATION", "").strip()

    config = {
        # General Settings
        "DEBUG_MODE": os.getenv("DEBUG_MODE", "False").lower() == "true",
        "OUTPUT_DIR": os.getenv("OUTPUT_DIR", _DEFAULTS["OUTPUT_DIR"]),
        "DB_FILENAME": os.getenv("DB_FILENAME", _DEFAULTS["DB_FILENAME"]),

        # Submission Settings
        "DEFAULT_LOCATION": default_location or _DEFAULTS["DEFAULT_LOCATION"],
        "MAX_UPLOAD_BYTES": _positive_number("MAX_UPLOAD_BYTES", int),
        "DETECTED_AT_SOURCE": _detected_at_source(),
        "CAPTURE_MAX_SKEW_SECONDS": _positive_number("CAPTURE_MAX_SKEW_SECONDS", int),

        # Classifier Gateway Settings
        "CLASSIFIER_URL": os.getenv("CLASSIFIER_URL", "").strip(),
        "CLASSIFIER_TIMEOUT": _positive_number("CLASSIFIER_TIMEOUT", float),

        # Statistics and History Settings
        "STATS_TIMEZONE": _timezone_name(),
        "RECENT_DEFAULT_LIMIT": _positive_number("RECENT_DEFAULT_LIMIT", int),

        # Web Settings
        "CORS_ORIGINS": os.getenv("CORS_ORIGINS", "*").strip() or "*",
        "API_HOST": os.getenv("API_HOST", _DEFAULTS["API_HOST"]),
        "API_PORT": _positive_number("API_PORT", int),
    }
    return config


def get_config():
    """Returns the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


if __name__ == "__main__":
    # For testing purposes, print the configuration
    from pprint import pprint

    pprint(load_config())
