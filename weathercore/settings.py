"""Process configuration read once from environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


class ConfigurationError(RuntimeError):
    """Raised when the environment does not describe a usable configuration."""


@dataclass(frozen=True)
class Settings:
    weather_api_key: str
    weather_api_url: str = "https://api.weatherapi.com/v1"
    cache_ttl: float = 300.0
    cache_check_period: float = 60.0
    request_timeout: float = 5.0
    log_level: str = "INFO"


def env(name: str, default: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    source = os.environ if environ is None else environ
    value = source.get(name, default)
    if value is None:
        raise ConfigurationError(f"Environment variable {name} is required")
    return value


def _number(name: str, default: str, environ: Optional[Mapping[str, str]], errors: list) -> float:
    raw = env(name, default, environ)
    try:
        return float(raw)
    except ValueError:
        errors.append(f"{name} must be a number, got {raw!r}.")
        return float(default)


def validate_settings(settings: Settings, errors: Optional[list] = None) -> Settings:
    errors = list(errors or [])
    if not settings.weather_api_key.strip():
        errors.append("WEATHER_API_KEY must be a non-empty string.")
    if not settings.weather_api_url.startswith(("http://", "https://")):
        errors.append("WEATHER_API_URL must be an http(s) URL.")
    if settings.cache_ttl < 0:
        errors.append("WEATHER_CACHE_TTL must be >= 0.")
    if settings.cache_check_period <= 0:
        errors.append("WEATHER_CACHE_CHECK_PERIOD must be > 0.")
    if settings.request_timeout <= 0:
        errors.append("WEATHER_REQUEST_TIMEOUT must be > 0.")
    if not isinstance(getattr(logging, settings.log_level.upper(), None), int):
        errors.append("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL.")
    if errors:
        raise ConfigurationError("Invalid configuration:\n- " + "\n- ".join(errors))
    return settings


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    errors: list = []
    settings = Settings(
        weather_api_key=env("WEATHER_API_KEY", environ=environ),
        weather_api_url=env("WEATHER_API_URL", Settings.weather_api_url, environ),
        cache_ttl=_number("WEATHER_CACHE_TTL", "300", environ, errors),
        cache_check_period=_number("WEATHER_CACHE_CHECK_PERIOD", "60", environ, errors),
        request_timeout=_number("WEATHER_REQUEST_TIMEOUT", "5.0", environ, errors),
        log_level=env("LOG_LEVEL", "INFO", environ),
    )
    return validate_settings(settings, errors)


__all__ = ["ConfigurationError", "Settings", "load_settings", "validate_settings"]
