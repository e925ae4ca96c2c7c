# src/podman_exporter/core/config.py

import logging
import os
from urllib.parse import urlparse

from dotenv import load_dotenv

from podman_exporter import __version__

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

SUPPORTED_ENGINE_SCHEMES = ("unix", "tcp", "http", "https")
SCRAPE_ERROR_POLICIES = ("stale", "fail")


def _get_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "t", "y", "yes")


def normalize_log_level(level: str) -> str:
    """
    Canonical lowercase name of a stdlib level, so aliases such as WARN or FATAL
    map to names uvicorn accepts ('warning', 'critical').

    Raises:
        ValueError: If ``level`` is not a known logging level name.
    """
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int) or value == logging.NOTSET:
        raise ValueError(f"Unknown log level '{level}'.")
    return logging.getLevelName(value).lower()


class Config:
    """
    Handles the exporter's configuration by loading values from environment variables.

    Values are read when the instance is created, so a fresh ``Config()`` picks up
    environment changes. Command-line options override these values at startup.
    """

    def __init__(self):
        # --- HTTP endpoint variables ---
        self.EXPORTER_HOST = os.getenv("EXPORTER_HOST", "127.0.0.1")
        self.EXPORTER_PORT = int(os.getenv("EXPORTER_PORT", "9807"))

        # --- Podman API variables ---
        self.PODMAN_URI = os.getenv("PODMAN_URI", "unix:///run/podman/podman.sock")
        self.PODMAN_API_VERSION = os.getenv("PODMAN_API_VERSION", "v4.0.0")
        self.PODMAN_VERIFY_CERTS = _get_bool("PODMAN_VERIFY_CERTS", "True")

        # --- HTTP client variables ---
        self.DEFAULT_TIMEOUT_CONNECT = float(os.getenv("DEFAULT_TIMEOUT_CONNECT", "5"))
        self.DEFAULT_TIMEOUT_READ = float(os.getenv("DEFAULT_TIMEOUT_READ", "30"))
        self.USER_AGENT = os.getenv("USER_AGENT", f"podman-exporter/{__version__}")

        # --- Metrics variables ---
        # Set to "podman" to get the podman_container_* names.
        self.METRICS_NAMESPACE = os.getenv("METRICS_NAMESPACE", "")
        self.SCRAPE_ERROR_POLICY = os.getenv("SCRAPE_ERROR_POLICY", "stale").lower()

        # --- Logging variables ---
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    def validate_instance(self):
        if self.SCRAPE_ERROR_POLICY not in SCRAPE_ERROR_POLICIES:
            raise ValueError("SCRAPE_ERROR_POLICY must be 'stale' or 'fail'.")
        if not 0 < self.EXPORTER_PORT < 65536:
            raise ValueError(f"EXPORTER_PORT must be between 1 and 65535, got {self.EXPORTER_PORT}.")
        scheme = urlparse(self.PODMAN_URI).scheme
        if scheme not in SUPPORTED_ENGINE_SCHEMES:
            raise ValueError(
                f"PODMAN_URI scheme '{scheme}' is not supported. Use one of: {', '.join(SUPPORTED_ENGINE_SCHEMES)}."
            )
        normalize_log_level(self.LOG_LEVEL)
        if self.DEFAULT_TIMEOUT_CONNECT <= 0 or self.DEFAULT_TIMEOUT_READ <= 0:
            logging.getLogger(__name__).warning("Non-positive HTTP timeouts configured; engine calls may hang.")


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
