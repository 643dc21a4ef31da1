from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict


class TemperatureUnit(str, Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def symbol(self) -> str:
        return "°C" if self is TemperatureUnit.CELSIUS else "°F"

    @property
    def provider_field(self) -> str:
        """Name of the provider's current-temperature field in this unit."""
        return "temp_c" if self is TemperatureUnit.CELSIUS else "temp_f"


class ReadingStatus(str, Enum):
    FRESH = "fresh"
    DEGRADED_STALE = "degraded-stale"
    OFFLINE = "offline"


@dataclass(frozen=True)
class WeatherReading:
    """Current temperature for a location as served to callers.

    ``temperature`` is rounded to one fractional digit, ``unit`` holds the
    display symbol and ``location`` the provider's canonical "City, Country"
    form. ``timestamp`` is the moment the provider was queried, in UTC.
    """

    temperature: float
    unit: str
    location: str
    timestamp: datetime
    status: ReadingStatus = ReadingStatus.FRESH

    def as_dict(self) -> Dict[str, Any]:
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return {
            "temperature": self.temperature,
            "unit": self.unit,
            "location": self.location,
            "timestamp": timestamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class CacheEntry:
    reading: WeatherReading
    expires_at: float


__all__ = ["CacheEntry", "ReadingStatus", "TemperatureUnit", "WeatherReading"]
