"""TTL cache of route availability verdicts.

Positive and negative verdicts live for the same TTL: an unsupported route
is remembered as aggressively as a working one so a failing route is not
probed on every request.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from bridgeroute.routing.base import RouteKey

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes

Clock = Callable[[], float]


@dataclass(frozen=True)
class RouteAvailability:
    """A cached verdict and when it was observed."""

    available: bool
    observed_at: float


class RouteAvailabilityCache:
    """Maps RouteKey -> RouteAvailability, expiring entries after ``ttl_seconds``.

    The map is guarded by a lock so it can be shared between threads; the
    lock is only held for dictionary access, never across network calls.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            ttl_seconds: Maximum age of a trustworthy verdict
            clock: Time source in seconds (tests pass a fake clock)
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._last_sweep = clock()
        self._entries: dict[RouteKey, RouteAvailability] = {}
        self._lock = threading.Lock()

    def _is_expired(self, entry: RouteAvailability, now: float) -> bool:
        return now - entry.observed_at > self.ttl_seconds

    def _drop_expired(self, now: float) -> int:
        # caller holds the lock
        expired = [k for k, v in self._entries.items() if self._is_expired(v, now)]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        return len(expired)

    def _sweep_if_due(self, now: float) -> int:
        # caller holds the lock; at most one full sweep per TTL period
        if now - self._last_sweep < self.ttl_seconds:
            return 0
        return self._drop_expired(now)

    def get(self, key: RouteKey) -> Optional[bool]:
        """Get the cached verdict, or None if unknown or expired."""
        now = self._clock()
        with self._lock:
            self._sweep_if_due(now)
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._is_expired(entry, now):
                del self._entries[key]
                return None
            return entry.available

    def set(self, key: RouteKey, available: bool) -> None:
        """Store a verdict stamped with the current time.

        Lookups and writes sweep out expired entries once per TTL period, so
        keys that are never looked up again do not accumulate.
        """
        now = self._clock()
        with self._lock:
            swept = self._sweep_if_due(now)
            self._entries[key] = RouteAvailability(available=available, observed_at=now)
        if swept:
            logger.debug(f"Purged {swept} expired route verdict(s)")
        logger.debug(f"Cached route {key}: {'available' if available else 'unavailable'}")

    def invalidate(self, key: RouteKey) -> None:
        """Forget the verdict for one route."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Forget all verdicts."""
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            removed = self._drop_expired(now)
        if removed:
            logger.debug(f"Purged {removed} expired route verdict(s)")
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
