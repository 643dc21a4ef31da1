from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Union

import pytest
import requests_mock as requests_mock_lib

from weathercore.cache import WeatherCache
from weathercore.providers.base import ProviderObservation
from weathercore.services.weather import WeatherService
from weathercore.throttle import RefreshThrottle


FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
TTL = 300


class TimeController:
    def __init__(self) -> None:
        self.now = 1000.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class FakeProvider:
    """Provider double returning queued observations or raising queued errors."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self._results: List[Union[ProviderObservation, Exception]] = []

    def will_return(self, temp_c: float, temp_f: Optional[float] = None, name: str = "Lisbon", country: str = "Portugal"):
        if temp_f is None:
            temp_f = temp_c * 9 / 5 + 32
        self._results.append(ProviderObservation(temp_c=temp_c, temp_f=temp_f, name=name, country=country))
        return self

    def will_raise(self, exc: Exception):
        self._results.append(exc)
        return self

    def current(self, location: str) -> ProviderObservation:
        self.calls.append(location)
        if not self._results:
            raise AssertionError(f"unexpected provider call for {location}")
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        pass


@pytest.fixture()
def requests_mock():
    with requests_mock_lib.Mocker() as mocker:
        yield mocker


@pytest.fixture()
def clock() -> TimeController:
    return TimeController()


@pytest.fixture()
def cache(clock: TimeController) -> WeatherCache:
    return WeatherCache(ttl=TTL, time_func=clock)


@pytest.fixture()
def throttle(clock: TimeController) -> RefreshThrottle:
    return RefreshThrottle(time_func=clock)


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def service(provider: FakeProvider, cache: WeatherCache, throttle: RefreshThrottle) -> WeatherService:
    return WeatherService(provider=provider, cache=cache, throttle=throttle, now_func=lambda: FIXED_NOW)
