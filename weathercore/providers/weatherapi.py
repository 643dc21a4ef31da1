from __future__ import annotations

import logging
from typing import Optional

from requests import Response

from .base import ProviderObservation, WeatherProvider
from ..errors import NotFoundError, ProviderError


# WeatherAPI.com answers HTTP 400 with this error code for unknown locations.
NO_MATCHING_LOCATION = 1006


class WeatherApiProvider(WeatherProvider):
    base_url = "https://api.weatherapi.com/v1"

    def __init__(self, api_key: str, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = (base_url or self.base_url).rstrip("/")
        self._log = logging.getLogger(self.__class__.__name__)

    def current(self, location: str) -> ProviderObservation:
        params = {"key": self.api_key, "q": location, "aqi": "no"}
        response = self._request("GET", f"{self.base_url}/current.json", params=params)
        data = self._json(response)
        current = data.get("current")
        place = data.get("location")
        if not isinstance(current, dict) or not isinstance(place, dict):
            raise ProviderError("missing current weather", location=location)
        temp_c = _safe_float(current.get("temp_c"))
        temp_f = _safe_float(current.get("temp_f"))
        if temp_c is None or temp_f is None:
            raise ProviderError("missing temperature in response", location=location)
        return ProviderObservation(
            temp_c=temp_c,
            temp_f=temp_f,
            name=str(place.get("name") or location),
            country=str(place.get("country") or ""),
        )

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 404 or self._is_unknown_location(response):
            self._log.info("Location not found: %s", response.text)
            raise NotFoundError("Location not found")
        return super()._handle_response(response)

    @staticmethod
    def _is_unknown_location(response: Response) -> bool:
        if response.status_code != 400:
            return False
        try:
            return response.json()["error"]["code"] == NO_MATCHING_LOCATION
        except (ValueError, KeyError, TypeError):
            return False


def _safe_float(value: Optional[object]) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


__all__ = ["WeatherApiProvider"]
