# quackfetch/search/engine.py
"""
search(query) = cache lookup → fetch results page → parse → cache write.

SearchContext owns everything that lives across calls: the fetcher (with its
per-host rate-limit state and HTTP connection pool) and the result cache.

Lifecycle:
    with SearchContext() as ctx:      # create once
        ctx.search("python")          # reuse across calls
        ctx.search("python", max=5)
    # close() releases the HTTP client; cache and rate-limit state go with it

The module-level search()/clear_cache()/get_cache_stats() helpers run on a
lazily created process-wide default context.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any

from quackfetch import config
from quackfetch.exceptions import SearchFailed, ValidationError
from quackfetch.fetch.client import FetcherClient
from quackfetch.utils import is_blank

from .cache import ResultCache, build_cache_key
from .models import CacheStats, SearchResult
from .parser import parse_search_html

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchOptions:
    """
    Per-call options. Durations are in seconds.

    cache_ttl/cache_size only take effect when the context creates its cache,
    i.e. on the first cached search. use_instant_api is accepted and folded
    into the cache key but does not change fetching or parsing.
    """

    max: int = field(default_factory=lambda: config.MAX_RESULTS)
    cache_ttl: float = field(default_factory=lambda: config.CACHE_TTL_S)
    cache_size: int = field(default_factory=lambda: config.CACHE_SIZE)
    # None defers to the fetcher's own user agent
    user_agent: str | None = None
    rate_limit: float = field(default_factory=lambda: config.RATE_LIMIT_S)
    use_instant_api: bool = False
    use_cache: bool = True
    timeout: float = field(default_factory=lambda: config.FETCH_TIMEOUT_S)
    retries: int = field(default_factory=lambda: config.FETCH_MAX_RETRIES)
    retry_delay: float = field(default_factory=lambda: config.FETCH_RETRY_DELAY_S)
    check_robots: bool = field(default_factory=lambda: config.CHECK_ROBOTS)


def _validate_query(query: Any) -> str:
    if is_blank(query):
        raise ValidationError("Query must be a non-empty string")
    return query


def _is_positive(value: Any, types: type | tuple[type, ...]) -> bool:
    return not isinstance(value, bool) and isinstance(value, types) and value > 0


def _resolve_options(options: SearchOptions | None, overrides: dict[str, Any]) -> SearchOptions:
    opts = options or SearchOptions()
    if overrides:
        try:
            opts = replace(opts, **overrides)
        except TypeError as err:
            raise ValidationError(f"Unknown search option: {err}") from err
    if not _is_positive(opts.max, int):
        raise ValidationError(f"max must be a positive integer; got {opts.max!r}")
    if not _is_positive(opts.cache_size, int):
        raise ValidationError(f"cache_size must be a positive integer; got {opts.cache_size!r}")
    if not _is_positive(opts.cache_ttl, (int, float)):
        raise ValidationError(f"cache_ttl must be a positive number; got {opts.cache_ttl!r}")
    return opts


class SearchContext:
    """Caller-owned state for search(): fetcher, rate limits, result cache."""

    def __init__(
        self,
        *,
        fetcher: FetcherClient | None = None,
        cache: ResultCache | None = None,
    ) -> None:
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or FetcherClient()
        self._cache = cache
        self._cache_lock = threading.Lock()

    # ---- cache lifecycle -------------------------------------------------------------

    @property
    def cache(self) -> ResultCache | None:
        return self._cache

    def _ensure_cache(self, opts: SearchOptions) -> ResultCache:
        with self._cache_lock:
            if self._cache is None:
                self._cache = ResultCache(max_size=opts.cache_size, ttl_s=opts.cache_ttl)
            return self._cache

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    def get_cache_stats(self) -> CacheStats | None:
        """None until the first cached search creates the cache."""
        if self._cache is None:
            return None
        return self._cache.stats()

    # ---- search ----------------------------------------------------------------------

    def search(
        self, query: str, options: SearchOptions | None = None, **overrides: Any
    ) -> list[SearchResult]:
        query = _validate_query(query)
        opts = _resolve_options(options, overrides)

        cache = self._ensure_cache(opts) if opts.use_cache else None
        key = build_cache_key(query, opts.max, opts.use_instant_api)

        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                log.debug("cache hit for %r", query, extra={"cache_key": key})
                return [r.as_cached() for r in cached]
            log.debug("cache miss for %r", query, extra={"cache_key": key})

        try:
            html = self.fetcher.search_duckduckgo_html(
                query,
                user_agent=opts.user_agent,
                rate_limit_s=opts.rate_limit,
                timeout_s=opts.timeout,
                retries=opts.retries,
                retry_delay_s=opts.retry_delay,
                check_robots=opts.check_robots,
            )
            results = parse_search_html(html, max_results=opts.max)
        except Exception as exc:
            raise SearchFailed(query, exc) from exc

        if cache is not None and results:
            cache.set(key, results)
        return results

    # ---- teardown --------------------------------------------------------------------

    def close(self) -> None:
        if self._owns_fetcher:
            self.fetcher.close()

    def __enter__(self) -> SearchContext:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# --------------------------------------------------------------------------------------
# Process-wide default context
# --------------------------------------------------------------------------------------

_DEFAULT: SearchContext | None = None
_DEFAULT_LOCK = threading.Lock()


def default_context() -> SearchContext:
    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            _DEFAULT = SearchContext()
        return _DEFAULT


def reset_default_context() -> None:
    """Close and drop the default context (tests, or before fork)."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        ctx, _DEFAULT = _DEFAULT, None
    if ctx is not None:
        ctx.close()


def search(
    query: str, options: SearchOptions | None = None, **overrides: Any
) -> list[SearchResult]:
    return default_context().search(query, options, **overrides)


def clear_cache() -> None:
    if _DEFAULT is not None:
        _DEFAULT.clear_cache()


def get_cache_stats() -> CacheStats | None:
    if _DEFAULT is None:
        return None
    return _DEFAULT.get_cache_stats()


__all__ = [
    "SearchContext",
    "SearchOptions",
    "clear_cache",
    "default_context",
    "get_cache_stats",
    "reset_default_context",
    "search",
]
