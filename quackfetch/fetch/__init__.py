# quackfetch/fetch/__init__.py
"""
Tiny fetcher package: robots gating, per-host throttling and an httpx client with retries.

Public entry points:
  - FetcherClient, build_search_url
  - robots helpers: parse_robots, is_allowed, check_robots_txt, fetch_robots_txt
  - throttle: RateLimiter, RateLimitTracker
"""

from .client import (
    FetcherClient,
    build_search_url,
)
from .robots import (
    RobotsRuleSet,
    check_robots_txt,
    fetch_robots_txt,
    is_allowed,
    parse_robots,
    path_matches_rule,
)
from .throttle import (
    RateLimiter,
    RateLimitTracker,
)

__all__ = [
    # client
    "FetcherClient",
    "build_search_url",
    # robots
    "RobotsRuleSet",
    "parse_robots",
    "is_allowed",
    "check_robots_txt",
    "fetch_robots_txt",
    "path_matches_rule",
    # throttle
    "RateLimiter",
    "RateLimitTracker",
]
