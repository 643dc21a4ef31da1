from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from threading import Lock
from typing import Callable, Dict, Optional, Tuple, Union

from .entities import CacheEntry, ReadingStatus, TemperatureUnit, WeatherReading


logger = logging.getLogger(__name__)

# Expired entries whose expiry lies further back than this are reported as
# degraded-stale by ignore_expiration lookups.
STALE_AFTER_SECONDS = 60 * 60


@dataclass(frozen=True)
class CacheStats:
    """Simple container for cache related counters."""

    hits: int = 0
    misses: int = 0
    keys: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "keys": self.keys}


class WeatherCache:
    """In-memory TTL cache of readings keyed by (location, unit)."""

    def __init__(self, ttl: float, time_func: Callable[[], float] = time.monotonic) -> None:
        if ttl < 0:
            raise ValueError("ttl must be non-negative")
        self.ttl = ttl
        self._time_func = time_func
        self._storage: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._lock = Lock()

    @staticmethod
    def cache_key(location: str, unit: Union[TemperatureUnit, str]) -> str:
        return f"{location.casefold()}_{TemperatureUnit(unit).value}"

    def get(
        self,
        location: str,
        unit: Union[TemperatureUnit, str],
        ignore_expiration: bool = False,
    ) -> Optional[WeatherReading]:
        if ignore_expiration:
            key = self.cache_key(location, unit)
            with self._lock:
                entry = self._storage.get(key)
                if entry is None:
                    self._misses += 1
                    return None
                self._hits += 1
                return self._classify(entry, self._time_func())
        reading, _ = self.lookup(location, unit)
        return reading

    def lookup(
        self, location: str, unit: Union[TemperatureUnit, str]
    ) -> Tuple[Optional[WeatherReading], Optional[CacheEntry]]:
        """Return ``(valid reading, expired entry)`` for a key in one locked step.

        An expired entry is evicted exactly like in :meth:`get` and handed back
        so the caller can still fall back on it (see :meth:`classify` and
        :meth:`restore`).
        """
        key = self.cache_key(location, unit)
        with self._lock:
            entry = self._storage.get(key)
            if entry is None:
                self._misses += 1
                return None, None
            if self._time_func() > entry.expires_at:
                del self._storage[key]
                self._misses += 1
                logger.debug("Cache entry %s expired", key)
                return None, entry
            self._hits += 1
            return entry.reading, None

    def classify(self, entry: CacheEntry) -> WeatherReading:
        """Reading of ``entry`` as an ``ignore_expiration`` lookup reports it."""
        return self._classify(entry, self._time_func())

    def restore(self, location: str, unit: Union[TemperatureUnit, str], entry: CacheEntry) -> None:
        """Put an evicted entry back unless a newer one was stored meanwhile."""
        key = self.cache_key(location, unit)
        with self._lock:
            self._storage.setdefault(key, entry)

    @staticmethod
    def _classify(entry: CacheEntry, now: float) -> WeatherReading:
        if entry.expires_at < now - STALE_AFTER_SECONDS:
            return replace(entry.reading, status=ReadingStatus.DEGRADED_STALE)
        return entry.reading

    def set(self, location: str, unit: Union[TemperatureUnit, str], reading: WeatherReading) -> None:
        key = self.cache_key(location, unit)
        with self._lock:
            self._storage[key] = CacheEntry(reading=reading, expires_at=self._time_func() + self.ttl)

    def invalidate(self, location: str, unit: Union[TemperatureUnit, str]) -> None:
        key = self.cache_key(location, unit)
        with self._lock:
            self._storage.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()
            self._hits = 0
            self._misses = 0

    def purge_expired(self) -> int:
        """Drop every entry past its expiry and return how many were removed."""
        with self._lock:
            now = self._time_func()
            expired = [key for key, entry in self._storage.items() if entry.expires_at < now]
            for key in expired:
                del self._storage[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, keys=len(self._storage))

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)


__all__ = ["CacheStats", "STALE_AFTER_SECONDS", "WeatherCache"]
