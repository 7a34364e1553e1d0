"""Search result models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class SearchResult:
    """One organic result. rank is 1-based and gap-free within a parse pass."""

    title: str
    url: str
    snippet: str
    rank: int
    source: str
    retrieved_at: str
    cached: bool = False

    def as_cached(self) -> SearchResult:
        return replace(self, cached=True)

    def to_dict(self) -> dict[str, Any]:
        """JSON shape used by the CLI and HTTP API; "cached" only appears on cache hits."""
        out: dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "rank": self.rank,
            "source": self.source,
            "retrievedAt": self.retrieved_at,
        }
        if self.cached:
            out["cached"] = True
        return out


@dataclass(frozen=True)
class CacheStats:
    size: int
    calculated_size: int
    max_size: int
    ttl: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "calculatedSize": self.calculated_size,
            "maxSize": self.max_size,
            "ttl": self.ttl,
        }
