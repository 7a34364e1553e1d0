# quackfetch/fetch/client.py
from __future__ import annotations

import logging
import time
from urllib.parse import urlencode, urlsplit

import httpx

from quackfetch import config
from quackfetch.exceptions import (
    FetchFailed,
    FetchTimeout,
    RobotsDisallowed,
    TransientFetchError,
)

from . import robots
from .throttle import RateLimiter

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------------------------------


def _split_origin_path(url: str) -> tuple[str, str, str]:
    """Return (host, origin, path_with_query) for an absolute URL."""
    parts = urlsplit(url)
    host = (parts.hostname or parts.netloc).lower()
    origin = f"{parts.scheme or 'https'}://{parts.netloc}"
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return host, origin, path


def _sleep(dt: float) -> None:
    # tests can monkeypatch time.sleep
    time.sleep(dt)


def build_search_url(query: str, base_url: str | None = None) -> str:
    """The HTML search endpoint with q percent-encoded as a form value (spaces become '+')."""
    base = base_url or config.SEARCH_URL
    return f"{base}?{urlencode({'q': query})}"


# --------------------------------------------------------------------------------------------------
# Client
# --------------------------------------------------------------------------------------------------


class FetcherClient:
    """
    Small wrapper around httpx that enforces politeness throttling, robots.txt and retries.

    Flow:
      1) throttle.wait_for_turn(host)  (once per fetch, not per retry)
      2) robots.txt gate if check_robots → RobotsDisallowed (never retried)
      3) HTTP GET with a per-attempt timeout
         timeout      → FetchTimeout (never retried)
         non-2xx/net  → TransientFetchError, retried with exponential backoff
      4) after the last attempt → FetchFailed(url, attempts, last error)
    """

    def __init__(
        self,
        *,
        user_agent: str | None = None,
        rate_limiter: RateLimiter | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.user_agent = user_agent or config.USER_AGENT
        self.rate_limiter = rate_limiter or RateLimiter()
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(follow_redirects=True)

    # ---- core fetch ------------------------------------------------------------------

    def fetch(
        self,
        url: str,
        *,
        user_agent: str | None = None,
        timeout_s: float | None = None,
        retries: int | None = None,
        retry_delay_s: float | None = None,
        check_robots: bool | None = None,
        rate_limit_s: float | None = None,
    ) -> str:
        """GET url and return the response body as text."""
        ua = user_agent or self.user_agent
        timeout = config.FETCH_TIMEOUT_S if timeout_s is None else timeout_s
        max_retries = config.FETCH_MAX_RETRIES if retries is None else max(0, int(retries))
        delay = config.FETCH_RETRY_DELAY_S if retry_delay_s is None else retry_delay_s
        gate = config.CHECK_ROBOTS if check_robots is None else check_robots

        host, origin, path = _split_origin_path(url)

        # (1) politeness wait
        self.rate_limiter.wait_for_turn(host, rate_limit_s)

        # (2) robots gate
        if gate:
            self._enforce_robots(origin, path, ua)

        # (3) network fetch with retries
        return self._do_request_with_retries(url, ua, timeout, max_retries, delay)

    def search_duckduckgo_html(
        self,
        query: str,
        *,
        user_agent: str | None = None,
        rate_limit_s: float | None = None,
        timeout_s: float | None = None,
        retries: int | None = None,
        retry_delay_s: float | None = None,
        check_robots: bool | None = None,
    ) -> str:
        """Fetch the HTML results page for query."""
        url = build_search_url(query)
        log.info("searching %s", url, extra={"query": query})
        return self.fetch(
            url,
            user_agent=user_agent,
            timeout_s=timeout_s,
            retries=retries,
            retry_delay_s=retry_delay_s,
            check_robots=check_robots,
            rate_limit_s=rate_limit_s,
        )

    # ----------------------------------------------------------------------------------
    # Internals
    # ----------------------------------------------------------------------------------

    def _enforce_robots(self, origin: str, path: str, user_agent: str) -> None:
        text = robots.fetch_robots_txt(self._client, origin, user_agent)
        if text is None:
            return
        if not robots.check_robots_txt(text, user_agent, path):
            raise RobotsDisallowed(f"Access to {path} is disallowed by robots.txt")

    def _attempt(self, url: str, user_agent: str, timeout_s: float) -> str:
        headers = {
            "User-Agent": user_agent,
            "Accept": config.FETCH_ACCEPT,
            "Accept-Language": config.FETCH_ACCEPT_LANGUAGE,
        }
        try:
            resp = self._client.get(url, headers=headers, timeout=timeout_s)
        except httpx.TimeoutException as exc:
            raise FetchTimeout(f"Request to {url} timed out after {timeout_s:g}s") from exc
        except httpx.RequestError as exc:
            raise TransientFetchError(f"{type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            raise TransientFetchError(
                f"HTTP {resp.status_code}: {resp.reason_phrase}",
                status_code=resp.status_code,
                reason=resp.reason_phrase,
            )
        return resp.text

    def _do_request_with_retries(
        self,
        url: str,
        user_agent: str,
        timeout_s: float,
        retries: int,
        retry_delay_s: float,
    ) -> str:
        last_error: TransientFetchError | None = None
        attempt = 0
        while attempt <= retries:
            try:
                return self._attempt(url, user_agent, timeout_s)
            except TransientFetchError as exc:
                last_error = exc
            if attempt < retries:
                backoff = retry_delay_s * (2**attempt)
                log.warning(
                    "fetch %s failed (%s); retry %d/%d in %.2fs",
                    url,
                    last_error,
                    attempt + 1,
                    retries,
                    backoff,
                )
                _sleep(backoff)
            attempt += 1

        raise FetchFailed(url, attempt, last_error) from last_error

    # ----------------------------------------------------------------------------------
    # Context manager
    # ----------------------------------------------------------------------------------

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> FetcherClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    "FetcherClient",
    "build_search_url",
]
