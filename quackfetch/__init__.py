"""
quackfetch: DuckDuckGo HTML search with per-host rate limiting, retries,
optional robots.txt gating and an in-memory TTL cache.

    from quackfetch import search
    for r in search("python packaging", max=5):
        print(r.rank, r.title, r.url)
"""

from quackfetch.exceptions import (
    FetchFailed,
    FetchTimeout,
    QuackfetchError,
    RobotsDisallowed,
    SearchFailed,
    TransientFetchError,
    ValidationError,
)
from quackfetch.search import (
    CacheStats,
    SearchContext,
    SearchOptions,
    SearchResult,
    clear_cache,
    get_cache_stats,
    parse_search_html,
    search,
)

__all__ = [
    "search",
    "clear_cache",
    "get_cache_stats",
    "parse_search_html",
    "SearchContext",
    "SearchOptions",
    "SearchResult",
    "CacheStats",
    # errors
    "QuackfetchError",
    "ValidationError",
    "RobotsDisallowed",
    "FetchTimeout",
    "TransientFetchError",
    "FetchFailed",
    "SearchFailed",
]

__version__ = "0.1.0"
