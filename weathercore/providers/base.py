from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from requests import Response

from ..errors import ProviderError, QuotaExceeded


@dataclass(frozen=True)
class ProviderObservation:
    """Raw current conditions as returned by a provider, before unit selection."""

    temp_c: float
    temp_f: float
    name: str
    country: str


@dataclass
class RequestConfig:
    timeout: float = 5.0


class WeatherProvider:
    """Base class that owns the HTTP session and timeout for providers."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def current(self, location: str) -> ProviderObservation:
        raise NotImplementedError

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text)
            raise QuotaExceeded("quota exceeded", upstream_status=429)
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text)
            raise ProviderError("Failed to fetch weather data", upstream_status=response.status_code)
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise ProviderError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise ProviderError("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> dict:
        try:
            data = response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise ProviderError("invalid json") from exc
        if not isinstance(data, dict):
            raise ProviderError("unexpected payload")
        return data

    def close(self) -> None:
        self.session.close()


__all__ = ["ProviderObservation", "RequestConfig", "WeatherProvider"]
