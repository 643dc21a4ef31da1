"""Error variants raised while resolving weather readings.

Each error carries a machine readable ``code`` and the HTTP-like
``status_code`` the request layer answers with, so callers never have to
inspect message strings.
"""
from __future__ import annotations

from typing import Optional


class WeatherError(RuntimeError):
    """Base class for every weather lookup failure."""

    code = "WEATHER_ERROR"
    status_code = 500

    def __init__(self, message: str, *, location: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location


class NotFoundError(WeatherError):
    """The provider does not recognise the requested location."""

    code = "WEATHER_API_ERROR"
    status_code = 404


class ProviderError(WeatherError):
    """Transport failure or non-success answer from the provider."""

    code = "WEATHER_API_ERROR"
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        location: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ) -> None:
        super().__init__(message, location=location)
        self.upstream_status = upstream_status


class QuotaExceeded(ProviderError):
    """Raised when the provider reports a quota/usage limit issue."""


class ValidationError(WeatherError):
    """The provider answered with a temperature outside the plausible range."""

    code = "VALIDATION_ERROR"
    status_code = 500

    def __init__(self, message: str, *, location: Optional[str] = None, value: Optional[float] = None) -> None:
        super().__init__(message, location=location)
        self.value = value


__all__ = ["NotFoundError", "ProviderError", "QuotaExceeded", "ValidationError", "WeatherError"]
