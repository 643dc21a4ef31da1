"""Wire the stores, provider and service together for one process."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .api import WeatherAPI
from .cache import WeatherCache
from .providers.base import RequestConfig, WeatherProvider
from .providers.weatherapi import WeatherApiProvider
from .reaper import PeriodicReaper
from .services.weather import WeatherService
from .settings import Settings
from .throttle import CLEANUP_PERIOD_SECONDS, RefreshThrottle


logger = logging.getLogger(__name__)


class WeatherApplication:
    """Own the lifecycle of the cache, the throttle and their reapers."""

    def __init__(
        self,
        settings: Settings,
        provider: Optional[WeatherProvider] = None,
        time_func: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self.cache = WeatherCache(ttl=settings.cache_ttl, time_func=time_func)
        self.throttle = RefreshThrottle(time_func=time_func)
        self.provider = provider or WeatherApiProvider(
            api_key=settings.weather_api_key,
            base_url=settings.weather_api_url,
            request_config=RequestConfig(timeout=settings.request_timeout),
        )
        self.service = WeatherService(provider=self.provider, cache=self.cache, throttle=self.throttle)
        self.api = WeatherAPI(self.service)
        self._reapers = []

    @property
    def running(self) -> bool:
        return bool(self._reapers)

    def start(self) -> "WeatherApplication":
        if self._reapers:
            return self
        self._reapers = [
            PeriodicReaper("weather-cache-reaper", self.cache.purge_expired, self.settings.cache_check_period),
            PeriodicReaper("weather-throttle-reaper", self.throttle.purge_stale, CLEANUP_PERIOD_SECONDS),
        ]
        for reaper in self._reapers:
            reaper.start()
        logger.info(
            "Weather core started (ttl=%ss, cache sweep every %ss)",
            self.settings.cache_ttl,
            self.settings.cache_check_period,
        )
        return self

    def stop(self, timeout: float = 5.0) -> None:
        for reaper in self._reapers:
            reaper.stop(timeout)
        self._reapers = []
        self.provider.close()
        logger.info("Weather core stopped")

    def __enter__(self) -> "WeatherApplication":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()


__all__ = ["WeatherApplication"]
