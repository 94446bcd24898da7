"""Configuration for the medication safety service.

Loads settings from environment variables (via a .env file or the system
environment). Every setting has a default so the package can be imported
without any environment at all, e.g. in CI or in unit tests.

The reference tables are deliberately not configurable here: they are a
versioned asset bundled with the package (see medsafe.reference_data).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists (it won't exist in CI or Docker — that's fine)
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path)

# --- Logging ---
def parse_log_level(value: str | None) -> str:
    """Return a level name logging accepts, falling back to INFO."""
    level = (value or "INFO").strip().upper()
    if level not in logging.getLevelNamesMapping():
        return "INFO"
    return level


# Level name passed to logging.basicConfig by the HTTP app (DEBUG shows a
# summary line for every evaluation). Unknown names fall back to INFO
# so a typo in the environment never breaks import.
MEDSAFE_LOG_LEVEL: str = parse_log_level(os.getenv("MEDSAFE_LOG_LEVEL"))

# --- HTTP API ---
# Title shown in the generated OpenAPI docs (/docs).
MEDSAFE_API_TITLE: str = os.getenv("MEDSAFE_API_TITLE", "Medication Safety Evaluator")
