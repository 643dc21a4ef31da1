"""Minimum-interval gate for manually forced refreshes.

The throttle is independent from the cache TTL: even with a zero TTL a single
location cannot be force-refreshed more often than once per window.
"""
from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Dict


logger = logging.getLogger(__name__)

THROTTLE_INTERVAL_SECONDS = 30.0
RECORD_MAX_AGE_SECONDS = 5 * 60.0
CLEANUP_PERIOD_SECONDS = 60.0


class RefreshThrottle:
    def __init__(
        self,
        interval: float = THROTTLE_INTERVAL_SECONDS,
        max_age: float = RECORD_MAX_AGE_SECONDS,
        time_func: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self.max_age = max_age
        self._time_func = time_func
        self._last_refresh: Dict[str, float] = {}
        self._lock = Lock()

    def can_refresh(self, location: str) -> bool:
        return self.seconds_until_allowed(location) == 0

    def seconds_until_allowed(self, location: str) -> float:
        key = location.casefold()
        with self._lock:
            last = self._last_refresh.get(key)
            if last is None:
                return 0.0
            elapsed = self._time_func() - last
        if elapsed >= self.interval:
            return 0.0
        return self.interval - elapsed

    def record_refresh(self, location: str) -> None:
        with self._lock:
            self._last_refresh[location.casefold()] = self._time_func()

    def clear_throttle(self, location: str) -> None:
        with self._lock:
            self._last_refresh.pop(location.casefold(), None)

    def clear_all(self) -> None:
        with self._lock:
            self._last_refresh.clear()

    def purge_stale(self) -> int:
        with self._lock:
            cutoff = self._time_func() - self.max_age
            stale = [key for key, last in self._last_refresh.items() if last < cutoff]
            for key in stale:
                del self._last_refresh[key]
        if stale:
            logger.debug("Purged %d throttle records", len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_refresh)


__all__ = ["CLEANUP_PERIOD_SECONDS", "RefreshThrottle", "THROTTLE_INTERVAL_SECONDS"]
