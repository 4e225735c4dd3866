"""Configuration constants, endpoint paths, and .env loading.

WHY: Centralizes the handful of values the Wit client needs (base URL,
endpoint paths, content type, timeout, chunk size) so they are easy to
find and override without touching the request code.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values, overridable through environment variables. The
load_access_token() function gives a clear error when the token is missing.

RULES:
- Access token is loaded from .env / environment, never hardcoded
- WIT_TIMEOUT unset (or empty) means no timeout at all
- Endpoint paths are fixed by the remote service, not configurable
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Remote endpoints (fixed by the Wit.ai HTTP API)
# ---------------------------------------------------------------------------

SPEECH_PATH = "/speech"
MESSAGE_PATH = "/message"

SPEECH_CONTENT_TYPE = "audio/wav"
"""Content type sent with every speech and stream request."""

MAX_QUERY_LENGTH = 256
"""Text queries must be strictly shorter than this many characters."""


def _optional_float(raw: Optional[str]) -> Optional[float]:
    """Parse an optional float env value; empty or unset means None."""
    if raw is None or not raw.strip():
        return None
    return float(raw)


# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

WIT_BASE_URL = os.getenv("WIT_BASE_URL", "https://api.wit.ai")
WIT_TIMEOUT = _optional_float(os.getenv("WIT_TIMEOUT"))
WIT_STREAM_CHUNK_SIZE = int(os.getenv("WIT_STREAM_CHUNK_SIZE", "8192"))


def load_access_token() -> str:
    """Load the Wit access token from the environment.

    WHY: Every request carries the token as a Bearer credential. Loading
    it from the environment (via .env) keeps it out of source code.

    HOW: Reads WIT_ACCESS_TOKEN from os.environ (populated by python-dotenv).

    RULES:
    - Raises ValueError if the token is missing or empty
    - Never returns a default/placeholder value
    """
    token = os.getenv("WIT_ACCESS_TOKEN", "").strip()
    if not token:
        raise ValueError(
            "Wit access token not configured. "
            "Add WIT_ACCESS_TOKEN to the .env file or pass it explicitly."
        )
    return token
