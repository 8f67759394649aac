"""Portal configuration.

Values come from the environment (a local .env file is loaded on import) and
are read at call time so tests can override them with monkeypatch.

Usage:
    from portal_config import data_dir
    store = events_repo.open_store(data_dir())
"""
import os
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATA_DIR = "data"
# Events saved from the browser hand-off must start on or after this date
DEFAULT_SAVE_EVENTS_CUTOFF = "2025-10-01"

_TRUTHY = {"1", "true", "yes", "on"}


def data_dir() -> Path:
    """Return the directory holding the CSV backing files."""
    return Path(os.environ.get("PORTAL_DATA_DIR", DEFAULT_DATA_DIR))


def scraping_enabled() -> bool:
    """Return True when jobs should run the registered scrapers."""
    return os.environ.get("SCRAPING_ENABLED", "false").strip().lower() in _TRUTHY


def save_events_cutoff() -> date:
    return date.fromisoformat(
        os.environ.get("SAVE_EVENTS_CUTOFF", DEFAULT_SAVE_EVENTS_CUTOFF)
    )


def feed_timeout() -> int:
    return int(os.environ.get("FEED_TIMEOUT", "10"))


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()
