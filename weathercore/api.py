"""Minimal HTTP-like surface for the temperature endpoints.

:class:`WeatherAPI` validates query/body parameters, applies the manual
refresh throttle and maps weather errors to status codes.  It does not depend
on a web framework, any WSGI/ASGI host can translate its :class:`Response`.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from .entities import TemperatureUnit
from .errors import WeatherError
from .services.weather import WeatherService


MAX_LOCATION_LENGTH = 50
THROTTLE_MESSAGE = "Please wait 30 seconds before requesting another update"


@dataclass
class Response:
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})

    def json(self) -> Any:
        return json.loads(self.body)


class WeatherAPI:
    CURRENT_PATH = "/api/v1/external/weather/current"
    REFRESH_PATH = "/api/v1/external/weather/refresh"

    def __init__(self, service: WeatherService) -> None:
        self._service = service
        self._routes = {
            self.CURRENT_PATH: ("GET", self.get_current),
            self.REFRESH_PATH: ("POST", self.refresh),
        }

    def handle_request(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> Response:
        route = self._routes.get(path.rstrip("/") or "/")
        if route is None:
            return _error(404, "NOT_FOUND", "Not found")
        expected_method, handler = route
        if method.upper() != expected_method:
            return _error(405, "METHOD_NOT_ALLOWED", "Method not allowed")
        return handler(params or {})

    # -- Routes -------------------------------------------------------------
    def get_current(self, params: Mapping[str, Any]) -> Response:
        location, unit, problems = _validate(params)
        if problems:
            return _error(400, "VALIDATION_ERROR", "Invalid request parameters", problems)
        try:
            reading = self._service.get_current_temperature(location, unit)
        except WeatherError as exc:
            return _error(exc.status_code, exc.code, exc.message)
        return _success(reading.as_dict())

    def refresh(self, params: Mapping[str, Any]) -> Response:
        location, unit, problems = _validate(params)
        if problems:
            return _error(400, "VALIDATION_ERROR", "Invalid request parameters", problems)
        if not self._service.check_refresh_throttle(location):
            wait = self._service.throttle.seconds_until_allowed(location)
            response = _error(429, "THROTTLE_ERROR", THROTTLE_MESSAGE)
            response.headers["Retry-After"] = str(max(1, math.ceil(wait)))
            return response
        try:
            reading = self._service.refresh_temperature(location, unit)
        except WeatherError as exc:
            return _error(exc.status_code, exc.code, exc.message)
        return _success(reading.as_dict())


def _validate(params: Mapping[str, Any]):
    problems = []
    location = params.get("location")
    if not isinstance(location, str) or not location.strip():
        problems.append({"field": "location", "message": "location is required"})
        location = ""
    else:
        location = location.strip()
        if len(location) > MAX_LOCATION_LENGTH:
            problems.append(
                {"field": "location", "message": f"location must be at most {MAX_LOCATION_LENGTH} characters"}
            )
    unit = params.get("unit")
    if unit is None:
        unit = TemperatureUnit.CELSIUS.value
    try:
        unit = TemperatureUnit(unit)
    except (TypeError, ValueError):
        problems.append({"field": "unit", "message": "unit must be 'celsius' or 'fahrenheit'"})
        unit = TemperatureUnit.CELSIUS
    return location, unit, problems


def _success(data: Dict[str, Any]) -> Response:
    return Response(status_code=200, body=json.dumps({"success": True, "data": data}, ensure_ascii=False))


def _error(status_code: int, code: str, message: str, details: Any = None) -> Response:
    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    payload = {
        "success": False,
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    return Response(status_code=status_code, body=json.dumps(payload, ensure_ascii=False))


__all__ = ["Response", "WeatherAPI"]
