# quackfetch/search/cache.py
from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass

from quackfetch import config

from .models import CacheStats, SearchResult

log = logging.getLogger(__name__)

# Cache key version. Bump when changing key construction to avoid stale collisions.
CACHE_KEY_VERSION = "v1"


def _now() -> float:
    # use monotonic so tests can freeze time via monkeypatch
    return time.monotonic()


def build_cache_key(query: str, max_results: int, use_instant_api: bool = False) -> str:
    """
    Build a deterministic cache key from the inputs that shape the result list.

    Only (query, max, use_instant_api) participate. Rate limit, user agent and
    robots checking do not change what the page says, so they share an entry.
    """
    key_payload = {
        "q": query,
        "max": int(max_results),
        "use_instant_api": bool(use_instant_api),
    }
    raw = json.dumps(key_payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    digest = hashlib.sha256(raw).hexdigest()
    return f"search:{CACHE_KEY_VERSION}:{digest}"


@dataclass
class CacheEntry:
    value: tuple[SearchResult, ...]
    inserted_at: float
    expires_at: float

    @property
    def fresh(self) -> bool:
        return self.expires_at > _now()


class ResultCache:
    """
    Bounded in-memory map from cache key to search results.

    - Capacity: inserting past max_size evicts the oldest insertion. Reads do
      not refresh an entry's position.
    - TTL: every entry expires ttl_s seconds after it was set; expired entries
      read as absent and are purged lazily on access.
    """

    def __init__(self, max_size: int | None = None, ttl_s: float | None = None) -> None:
        self.max_size = config.CACHE_SIZE if max_size is None else int(max_size)
        self.ttl_s = config.CACHE_TTL_S if ttl_s is None else float(ttl_s)
        if self.max_size <= 0:
            raise ValueError("max_size must be a positive integer")
        if self.ttl_s <= 0:
            raise ValueError("ttl_s must be positive")
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def _live(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.fresh:
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> list[SearchResult] | None:
        with self._lock:
            entry = self._live(key)
            return list(entry.value) if entry is not None else None

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live(key) is not None

    def set(self, key: str, value: list[SearchResult]) -> None:
        now = _now()
        with self._lock:
            # Re-setting a key counts as a fresh insertion
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                value=tuple(value), inserted_at=now, expires_at=now + self.ttl_s
            )
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("cache full (%d); evicted %s", self.max_size, evicted)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> CacheStats:
        with self._lock:
            live = sum(1 for e in self._entries.values() if e.fresh)
            return CacheStats(
                size=len(self._entries),
                calculated_size=live,
                max_size=self.max_size,
                ttl=self.ttl_s,
            )


__all__ = [
    "CACHE_KEY_VERSION",
    "CacheEntry",
    "ResultCache",
    "build_cache_key",
]
