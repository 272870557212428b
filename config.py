"""Configuration management for schedule scraping."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    """Read an integer env var, falling back to the default if malformed."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() == "true"


# =============================================================================
# SOURCE SITE
# =============================================================================

BASE_URL = os.getenv("BASE_URL", "").rstrip("/")
HEADLESS = _env_bool("HEADLESS", True)

# 0 means every session on the calendar
EVENTS_TO_PROCESS = _env_int("EVENTS_TO_PROCESS", 0)

# Pacing between requests (milliseconds)
DELAY_BETWEEN_SPEAKERS = _env_int("DELAY_BETWEEN_SPEAKERS", 2000)
DELAY_BETWEEN_EVENTS = _env_int("DELAY_BETWEEN_EVENTS", 2000)

# =============================================================================
# STORAGE
# =============================================================================

MONGODB_URI = os.getenv("MONGODB_URI", "")
MONGODB_DATABASE = os.getenv("MONGODB_DATABASE", "grenadine_schedule")

VERBOSE = _env_bool("VERBOSE", False)

# =============================================================================
# VALIDATION
# =============================================================================

def validate_scraper_config() -> bool:
    """Check if the source site is configured."""
    return bool(BASE_URL)

def validate_mongo_config() -> bool:
    """Check if MongoDB is configured."""
    return bool(MONGODB_URI)
