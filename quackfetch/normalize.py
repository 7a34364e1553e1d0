# quackfetch/normalize.py
"""
URL normalization for search results.

normalize_url() strips tracking query parameters and a single trailing slash
from the path. extract_domain() derives the display domain of a URL.

Neither raises: a string that does not parse as an absolute URL comes back
unchanged (normalize_url) or yields "" (extract_domain).
"""

from __future__ import annotations

import re
from urllib.parse import SplitResult, unquote_plus, urlsplit, urlunsplit

# Exact parameter names; anything starting with "utm_" is dropped as well.
TRACKING_PARAMS: frozenset[str] = frozenset(
    {
        "ref",
        "source",
        "fbclid",
        "gclid",
        "msclkid",
        "twclid",
        "igshid",
        "_ga",
        "_gid",
        "mc_cid",
        "mc_eid",
    }
)
TRACKING_PREFIXES: tuple[str, ...] = ("utm_",)

_HOST_RE = re.compile(r"https?://([^/]+)", re.IGNORECASE)


def _parse_url(url: str) -> SplitResult | None:
    """Split an absolute URL, or return None when it is relative or malformed."""
    try:
        parts = urlsplit(url)
        # Touch .port so bad ports (e.g. "host:abc") surface here
        parts.port  # noqa: B018
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return parts


def is_tracking_param(name: str) -> bool:
    name = name.strip()
    if name in TRACKING_PARAMS:
        return True
    return any(name.startswith(p) for p in TRACKING_PREFIXES)


def _strip_tracking(query: str) -> str:
    if not query:
        return query
    kept: list[str] = []
    for pair in query.split("&"):
        if not pair:
            continue
        name = unquote_plus(pair.split("=", 1)[0])
        if is_tracking_param(name):
            continue
        # Keep the original encoding of everything we do not drop
        kept.append(pair)
    return "&".join(kept)


def normalize_url(url: str | None) -> str:
    """
    Remove tracking parameters and a trailing slash (unless the path is "/").

    Other query parameters keep their order and encoding. A value that does
    not parse as an absolute URL is returned unchanged; None becomes "".
    """
    if not url or not isinstance(url, str):
        return ""

    parts = _parse_url(url)
    if parts is None:
        return url

    path = parts.path
    if not path and parts.netloc:
        path = "/"
    if path.endswith("/") and path != "/":
        path = path[:-1]

    query = _strip_tracking(parts.query)
    return urlunsplit((parts.scheme, parts.netloc, path, query, parts.fragment))


def extract_domain(url: str | None) -> str:
    """Return the hostname of url without a leading "www.", or "" if there is none."""
    if not url:
        return ""

    parts = _parse_url(url)
    host = parts.hostname if parts is not None else None
    if not host:
        m = _HOST_RE.match(url)
        if not m:
            return ""
        host = m.group(1)

    return host[4:] if host.startswith("www.") else host


__all__ = [
    "TRACKING_PARAMS",
    "TRACKING_PREFIXES",
    "extract_domain",
    "is_tracking_param",
    "normalize_url",
]
