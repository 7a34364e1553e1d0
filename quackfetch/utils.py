# quackfetch/utils.py
"""
Shared utility functions used across the codebase.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now_iso() -> str:
    """
    Return the current UTC time as an ISO 8601 string with millisecond
    precision and a 'Z' suffix.

    Example: "2025-01-15T14:30:00.123Z"
    """
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def collapse_ws(s: str) -> str:
    return " ".join(str(s).strip().split())


def is_blank(value: object) -> bool:
    """True for None, non-strings and whitespace-only strings."""
    return not isinstance(value, str) or not value.strip()
