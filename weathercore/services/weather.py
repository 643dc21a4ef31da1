from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from ..cache import WeatherCache
from ..entities import CacheEntry, ReadingStatus, TemperatureUnit, WeatherReading
from ..errors import ProviderError, ValidationError, WeatherError
from ..providers.base import WeatherProvider
from ..throttle import RefreshThrottle


MIN_PLAUSIBLE_TEMPERATURE = -90.0
MAX_PLAUSIBLE_TEMPERATURE = 60.0


class WeatherService:
    """Serve current temperatures from cache, provider or offline fallback.

    Concurrent misses for the same key are not coalesced: each caller may
    query the provider and the last write wins in the cache.
    """

    def __init__(
        self,
        *,
        provider: WeatherProvider,
        cache: WeatherCache,
        throttle: RefreshThrottle,
        now_func: Callable[[], datetime] = lambda: datetime.now(tz=timezone.utc),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.throttle = throttle
        self._now_func = now_func
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def get_current_temperature(
        self, location: str, unit: Union[TemperatureUnit, str] = TemperatureUnit.CELSIUS
    ) -> WeatherReading:
        unit = TemperatureUnit(unit)
        cached, expired = self.cache.lookup(location, unit)
        if cached is not None:
            return cached

        try:
            reading = self._fetch(location, unit)
        except WeatherError as exc:
            return self._offline_fallback(location, unit, exc, expired)

        self.cache.set(location, unit, reading)
        return reading

    def refresh_temperature(
        self, location: str, unit: Union[TemperatureUnit, str] = TemperatureUnit.CELSIUS
    ) -> WeatherReading:
        """Drop the cached reading and fetch again.

        No admission check happens here; callers consult
        :meth:`check_refresh_throttle` before forcing a refresh.
        """
        unit = TemperatureUnit(unit)
        self.cache.invalidate(location, unit)
        self.throttle.record_refresh(location)
        return self.get_current_temperature(location, unit)

    def check_refresh_throttle(self, location: str) -> bool:
        return self.throttle.can_refresh(location)

    # Helpers ------------------------------------------------------------
    def _fetch(self, location: str, unit: TemperatureUnit) -> WeatherReading:
        try:
            observation = self.provider.current(location)
        except WeatherError:
            raise
        except Exception as exc:  # noqa: BLE001 - any provider crash counts as an outage
            self._log.error("Provider %s crashed", self.provider.__class__.__name__, exc_info=exc)
            raise ProviderError("Failed to fetch weather data", location=location) from exc

        temperature = getattr(observation, unit.provider_field)
        if not MIN_PLAUSIBLE_TEMPERATURE <= temperature <= MAX_PLAUSIBLE_TEMPERATURE:
            raise ValidationError(
                "Temperature value outside plausible range",
                location=location,
                value=temperature,
            )

        return WeatherReading(
            temperature=round(temperature, 1),
            unit=unit.symbol,
            location=f"{observation.name}, {observation.country}",
            timestamp=self._now_func(),
            status=ReadingStatus.FRESH,
        )

    def _offline_fallback(
        self,
        location: str,
        unit: TemperatureUnit,
        error: WeatherError,
        expired: Optional[CacheEntry],
    ) -> WeatherReading:
        if error.location is None:
            error.location = location
        if expired is not None:
            # keep the evicted entry around for the next failed miss
            self.cache.restore(location, unit, expired)
            stale = self.cache.classify(expired)
        else:
            stale = self.cache.get(location, unit, ignore_expiration=True)
        if stale is None:
            self._log.error("No weather data for %s (%s): %s", location, unit.value, error)
            raise error
        self._log.warning("Serving offline reading for %s (%s): %s", location, unit.value, error)
        return replace(stale, status=ReadingStatus.OFFLINE)


__all__ = ["MAX_PLAUSIBLE_TEMPERATURE", "MIN_PLAUSIBLE_TEMPERATURE", "WeatherService"]
