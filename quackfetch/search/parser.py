# quackfetch/search/parser.py
"""
HTML → SearchResult extraction for the DuckDuckGo HTML results page.

Two passes:
  1. Primary: result containers (div.result / div.web-result) with their known
     title, snippet and display-URL elements.
  2. Fallback, only when the primary pass finds nothing: any div whose class
     contains "result"; first link gives title/url, the container text minus
     the title gives a snippet of at most 200 chars.

Nothing here raises on bad markup; the worst case is an empty list.
"""

from __future__ import annotations

import logging
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup, Tag

from quackfetch import config
from quackfetch.normalize import extract_domain, normalize_url
from quackfetch.utils import collapse_ws, utc_now_iso

from .models import SearchResult

log = logging.getLogger(__name__)

RESULT_SELECTOR = "div.result, div.web-result"
TITLE_LINK_SELECTOR = "a.result__a, a.result-link"
# Priority order: the first selector that yields text wins
SNIPPET_SELECTORS: tuple[str, ...] = (
    "a.result__snippet, div.result__snippet",
    "span.result__snippet",
)
SOURCE_SELECTOR = "span.result__url, a.result__url"
FALLBACK_SELECTOR = 'div[class*="result"]'

FALLBACK_SNIPPET_MAX = 200
UNTITLED = "Untitled"

_REDIRECT_PATH = "/l/"
_REDIRECT_HOST_SUFFIX = "duckduckgo.com"


def unwrap_redirect(href: str) -> str | None:
    """
    Return the target of a /l/?uddg=... (or /l/?kh=...&uddg=...) redirect link,
    or None if href is not a redirect wrapper or carries no usable uddg value.
    """
    if not href:
        return None
    try:
        parts = urlsplit(href)
    except ValueError:
        return None
    if parts.netloc and not parts.netloc.lower().endswith(_REDIRECT_HOST_SUFFIX):
        return None
    if parts.path != _REDIRECT_PATH:
        return None
    for pair in parts.query.split("&"):
        name, _, value = pair.partition("=")
        if name != "uddg":
            continue
        # percent-decoding only; a literal "+" in the target stays "+"
        target = unquote(value)
        return target or None
    return None


def _first_text(node: Tag, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        found = node.select_one(selector)
        if found is None:
            continue
        text = collapse_ws(found.get_text(" "))
        if text:
            return text
    return ""


def _parse_primary(
    soup: BeautifulSoup, max_results: int, retrieved_at: str
) -> list[SearchResult]:
    results: list[SearchResult] = []
    for container in soup.select(RESULT_SELECTOR):
        if len(results) >= max_results:
            break

        link = container.select_one(TITLE_LINK_SELECTOR)
        title = collapse_ws(link.get_text(" ")) if link is not None else ""
        raw_href = str(link.get("href") or "") if link is not None else ""

        url = unwrap_redirect(raw_href) or raw_href
        if not title and not url:
            continue

        normalized = normalize_url(url)
        snippet = _first_text(container, SNIPPET_SELECTORS)
        source = _first_text(container, (SOURCE_SELECTOR,)) or extract_domain(normalized)

        results.append(
            SearchResult(
                title=title or UNTITLED,
                url=normalized,
                snippet=snippet,
                rank=len(results) + 1,
                source=source,
                retrieved_at=retrieved_at,
            )
        )
    return results


def _parse_fallback(
    soup: BeautifulSoup, max_results: int, retrieved_at: str
) -> list[SearchResult]:
    results: list[SearchResult] = []
    for container in soup.select(FALLBACK_SELECTOR):
        if len(results) >= max_results:
            break

        link = container.find("a")
        title = collapse_ws(link.get_text(" ")) if isinstance(link, Tag) else ""
        url = str(link.get("href") or "") if isinstance(link, Tag) else ""
        if not title and not url:
            continue

        text = collapse_ws(container.get_text(" "))
        if title:
            text = text.replace(title, "", 1).strip()

        results.append(
            SearchResult(
                title=title or UNTITLED,
                url=normalize_url(url),
                snippet=text[:FALLBACK_SNIPPET_MAX],
                rank=len(results) + 1,
                source=extract_domain(url),
                retrieved_at=retrieved_at,
            )
        )
    return results


def parse_search_html(html: str | None, max_results: int | None = None) -> list[SearchResult]:
    """Parse a results page into at most max_results ranked SearchResults."""
    limit = config.MAX_RESULTS if max_results is None else int(max_results)
    if not html or not isinstance(html, str) or limit <= 0:
        return []

    soup = BeautifulSoup(html, "html.parser")
    retrieved_at = utc_now_iso()

    results = _parse_primary(soup, limit, retrieved_at)
    if results:
        return results

    results = _parse_fallback(soup, limit, retrieved_at)
    if results:
        log.debug("primary selectors matched nothing; fallback found %d results", len(results))
    return results


__all__ = [
    "parse_search_html",
    "unwrap_redirect",
]
