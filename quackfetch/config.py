from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name, str(default)).strip()
    try:
        return int(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be an integer; got {v!r}") from err


def _getenv_float(name: str, default: float) -> float:
    v = os.getenv(name, str(default)).strip()
    try:
        return float(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be a number; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def _getenv_bool(name: str, default: bool) -> bool:
    """
    Read a loosely-typed boolean from the environment.

    Treats "1", "true", "yes", "on" (case-insensitive) as True;
    "0", "false", "no", "off", "" as False. If unset, returns default.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off", ""}:
        return False
    # Fallback: any other non-empty value -> True
    return True


# Load .env from project root if present
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env", override=False)

# ---- Bot identity ----
BOT_NAME = "quackfetch"
BOT_VERSION = "0.1"
CONTACT_URL = "https://github.com/quackfetch/quackfetch"

DEFAULT_USER_AGENT = f"{BOT_NAME}/{BOT_VERSION} (+{CONTACT_URL})"

# -------------------------------
# Search endpoint
# -------------------------------
SEARCH_URL: str = _getenv_str("QUACKFETCH_SEARCH_URL", "https://html.duckduckgo.com/html/")
MAX_RESULTS: int = _getenv_int("QUACKFETCH_MAX_RESULTS", 10)
# Upper bound the HTTP API clamps "max" into
API_MAX_RESULTS: int = _getenv_int("QUACKFETCH_API_MAX_RESULTS", 50)

# -------------------------------
# Fetch / robots (seconds)
# -------------------------------
USER_AGENT: str = _getenv_str("QUACKFETCH_USER_AGENT", DEFAULT_USER_AGENT)
FETCH_TIMEOUT_S: float = _getenv_float("QUACKFETCH_FETCH_TIMEOUT_SECONDS", 10.0)
FETCH_MAX_RETRIES: int = _getenv_int("QUACKFETCH_FETCH_MAX_RETRIES", 2)
FETCH_RETRY_DELAY_S: float = _getenv_float("QUACKFETCH_RETRY_DELAY_SECONDS", 1.0)
FETCH_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
FETCH_ACCEPT_LANGUAGE = "en-US,en;q=0.9"
ROBOTS_TIMEOUT_S: float = _getenv_float("QUACKFETCH_ROBOTS_TIMEOUT_SECONDS", 5.0)
CHECK_ROBOTS: bool = _getenv_bool("QUACKFETCH_CHECK_ROBOTS", True)

# -------------------------------
# Throttle / cache
# -------------------------------
RATE_LIMIT_S: float = _getenv_float("QUACKFETCH_RATE_LIMIT_SECONDS", 1.0)
CACHE_TTL_S: float = _getenv_float("QUACKFETCH_CACHE_TTL_SECONDS", 300.0)
CACHE_SIZE: int = _getenv_int("QUACKFETCH_CACHE_SIZE", 100)

# -------------------------------
# HTTP API
# -------------------------------
API_PORT: int = _getenv_int("PORT", 3000)
