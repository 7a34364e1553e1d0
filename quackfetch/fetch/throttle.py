# quackfetch/fetch/throttle.py
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass

from quackfetch import config

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------------------
# State
# --------------------------------------------------------------------------------------


@dataclass
class RateLimitTracker:
    last_request_at: float | None = None  # monotonic seconds of the last admitted request


def _now() -> float:
    # Use monotonic so tests can monkeypatch the clock
    return time.monotonic()


def _sleep(dt: float) -> None:
    # Calls real time.sleep, but tests can monkeypatch it.
    time.sleep(dt)


class RateLimiter:
    """
    Per-host minimum-interval throttle.

    One tracker per host, created on first use and kept for the lifetime of the
    limiter. A per-host lock is held while waiting, so concurrent callers for
    the same host are admitted one at a time and each sees the previous one's
    timestamp.
    """

    def __init__(self, min_interval_s: float | None = None) -> None:
        self.min_interval_s = config.RATE_LIMIT_S if min_interval_s is None else min_interval_s
        self._trackers: dict[str, RateLimitTracker] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._global_lock = threading.Lock()

    def _host_lock(self, host: str) -> threading.Lock:
        with self._global_lock:
            lk = self._locks.get(host)
            if lk is None:
                lk = threading.Lock()
                self._locks[host] = lk
            return lk

    def _tracker(self, host: str) -> RateLimitTracker:
        # hosts() and clear() walk the tracker map under the global lock
        with self._global_lock:
            st = self._trackers.get(host)
            if st is None:
                st = RateLimitTracker()
                self._trackers[host] = st
            return st

    # ----------------------------------------------------------------------------------
    # Core API
    # ----------------------------------------------------------------------------------

    def wait_for_turn(self, host: str, min_interval_s: float | None = None) -> float:
        """
        Sleep until at least min_interval_s has passed since the last request to
        host, then record now as the last request time.
        Returns the number of seconds slept (0 if no wait).
        """
        host = host.strip().lower()
        gap = self.min_interval_s if min_interval_s is None else max(0.0, float(min_interval_s))
        with self._host_lock(host):
            st = self._tracker(host)
            slept = 0.0
            if st.last_request_at is not None:
                elapsed = _now() - st.last_request_at
                if elapsed < gap:
                    slept = gap - elapsed
                    log.debug("throttling %s for %.3fs", host, slept)
                    _sleep(slept)
            st.last_request_at = _now()
            return slept

    # ----------------------------------------------------------------------------------
    # Introspection / test helpers
    # ----------------------------------------------------------------------------------

    def last_request_at(self, host: str) -> float | None:
        """Return the monotonic timestamp of the last admitted request (None if none)."""
        host = host.strip().lower()
        with self._global_lock:
            st = self._trackers.get(host)
        return st.last_request_at if st is not None else None

    def hosts(self) -> list[str]:
        with self._global_lock:
            return sorted(self._trackers)

    def clear(self, host: str | None = None) -> None:
        """
        Clear throttling state (all hosts or a single host).

        Per-host locks are kept so a caller still waiting on one stays serialized
        with callers that arrive after the clear.
        """
        with self._global_lock:
            if host is None:
                self._trackers.clear()
                return
            self._trackers.pop(host.strip().lower(), None)


__all__ = ["RateLimitTracker", "RateLimiter"]
