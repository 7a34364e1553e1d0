# quackfetch/search/__init__.py
from .cache import ResultCache, build_cache_key
from .engine import (
    SearchContext,
    SearchOptions,
    clear_cache,
    default_context,
    get_cache_stats,
    reset_default_context,
    search,
)
from .models import CacheStats, SearchResult
from .parser import parse_search_html

__all__ = [
    "CacheStats",
    "ResultCache",
    "SearchContext",
    "SearchOptions",
    "SearchResult",
    "build_cache_key",
    "clear_cache",
    "default_context",
    "get_cache_stats",
    "parse_search_html",
    "reset_default_context",
    "search",
]
