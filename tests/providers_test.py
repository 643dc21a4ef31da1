from __future__ import annotations

import pytest
import requests

from weathercore.errors import NotFoundError, ProviderError, QuotaExceeded
from weathercore.providers.base import RequestConfig
from weathercore.providers.weatherapi import WeatherApiProvider


BASE_URL = "https://weatherapi.test/v1"
CURRENT_URL = f"{BASE_URL}/current.json"


def make_provider() -> WeatherApiProvider:
    return WeatherApiProvider(api_key="secret", base_url=BASE_URL + "/", request_config=RequestConfig(timeout=2.0))


def lisbon_payload(temp_c=21.4, temp_f=70.5) -> dict:
    return {
        "location": {"name": "Lisbon", "region": "Lisboa", "country": "Portugal"},
        "current": {"temp_c": temp_c, "temp_f": temp_f, "condition": {"text": "Sunny"}},
    }


def test_current_normalization(requests_mock):
    requests_mock.get(CURRENT_URL, json=lisbon_payload())

    observation = make_provider().current("lisbon")

    assert observation.temp_c == 21.4
    assert observation.temp_f == 70.5
    assert observation.name == "Lisbon"
    assert observation.country == "Portugal"
    query = requests_mock.last_request.qs
    assert query["q"] == ["lisbon"]
    assert query["key"] == ["secret"]
    assert query["aqi"] == ["no"]
    assert requests_mock.last_request.timeout == 2.0


def test_404_is_not_found(requests_mock):
    requests_mock.get(CURRENT_URL, status_code=404, text="not found")

    with pytest.raises(NotFoundError):
        make_provider().current("Atlantis")


def test_unknown_location_code_is_not_found(requests_mock):
    requests_mock.get(
        CURRENT_URL,
        status_code=400,
        json={"error": {"code": 1006, "message": "No matching location found."}},
    )

    with pytest.raises(NotFoundError):
        make_provider().current("Atlantis")


def test_other_400_is_provider_error(requests_mock):
    requests_mock.get(CURRENT_URL, status_code=400, json={"error": {"code": 1003, "message": "Parameter q is missing."}})

    with pytest.raises(ProviderError) as excinfo:
        make_provider().current("")

    assert not isinstance(excinfo.value, NotFoundError)
    assert excinfo.value.upstream_status == 400


def test_server_error_is_provider_error(requests_mock):
    requests_mock.get(CURRENT_URL, status_code=503, text="unavailable")

    with pytest.raises(ProviderError) as excinfo:
        make_provider().current("Lisbon")

    assert excinfo.value.upstream_status == 503


def test_quota_is_reported(requests_mock):
    requests_mock.get(CURRENT_URL, status_code=429, text="quota exceeded")

    with pytest.raises(QuotaExceeded):
        make_provider().current("Lisbon")


@pytest.mark.parametrize("exc", [requests.ConnectTimeout, requests.ConnectionError])
def test_transport_errors_become_provider_errors(requests_mock, exc):
    requests_mock.get(CURRENT_URL, exc=exc)

    with pytest.raises(ProviderError) as excinfo:
        make_provider().current("Lisbon")

    assert isinstance(excinfo.value.__cause__, exc)


def test_invalid_json_is_provider_error(requests_mock):
    requests_mock.get(CURRENT_URL, text="<html>oops</html>")

    with pytest.raises(ProviderError, match="invalid json"):
        make_provider().current("Lisbon")


def test_missing_temperature_is_provider_error(requests_mock):
    requests_mock.get(CURRENT_URL, json=lisbon_payload(temp_c=None))

    with pytest.raises(ProviderError, match="missing temperature"):
        make_provider().current("Lisbon")


def test_missing_blocks_is_provider_error(requests_mock):
    requests_mock.get(CURRENT_URL, json={"current": {"temp_c": 1, "temp_f": 33.8}})

    with pytest.raises(ProviderError, match="missing current weather"):
        make_provider().current("Lisbon")
