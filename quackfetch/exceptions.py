"""
Shared exception classes used across the codebase.

Only ValidationError, RobotsDisallowed and FetchTimeout are surfaced without
retrying. TransientFetchError is retried by the fetcher and, once retries are
exhausted, wrapped in FetchFailed.
"""

from __future__ import annotations


class QuackfetchError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(QuackfetchError, ValueError):
    """
    Raised for bad caller input (empty query, non-positive max).

    Never retried and raised before any network access happens.
    """


class RobotsDisallowed(QuackfetchError):
    """Raised when robots.txt forbids the requested path. Not retried."""


class FetchTimeout(QuackfetchError, TimeoutError):
    """Raised when a single fetch attempt exceeds its timeout. Not retried."""


class TransientFetchError(QuackfetchError):
    """
    A retryable fetch failure.

    Examples:
        - non-2xx HTTP status (status_code/reason are set)
        - connection refused / reset, DNS failure
    """

    def __init__(
        self, message: str, *, status_code: int | None = None, reason: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class FetchFailed(QuackfetchError):
    """Raised after every attempt of a fetch failed with a TransientFetchError."""

    def __init__(self, url: str, attempts: int, last_error: BaseException | None) -> None:
        detail = str(last_error) if last_error is not None else "unknown error"
        super().__init__(f"Failed to fetch {url} after {attempts} attempts: {detail}")
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class SearchFailed(QuackfetchError):
    """Raised by the search layer; the underlying error is chained as __cause__."""

    def __init__(self, query: str, cause: BaseException) -> None:
        super().__init__(f'Search failed for query "{query}": {cause}')
        self.query = query
        self.cause = cause


__all__ = [
    "QuackfetchError",
    "ValidationError",
    "RobotsDisallowed",
    "FetchTimeout",
    "TransientFetchError",
    "FetchFailed",
    "SearchFailed",
]
