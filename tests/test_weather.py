"""
Tests for the weather lookup flow.

This module covers payload normalization, the OpenWeatherMap client and
the public /api/weather endpoint.
"""

import copy
from datetime import datetime, timezone

import httpx
import pytest

from app.config import settings
from app.core.exceptions import CityNotFound, ProviderError, ValidationError
from app.services.weather import (
    OpenWeatherClient,
    WeatherService,
    format_clock_time,
    meters_to_km,
    normalize_weather,
    round_half_up,
    utc_timestamp,
)
from conftest import LONDON_PAYLOAD, WeatherProviderStub

FIXED_NOW = datetime(2026, 10, 18, 9, 30, 15, 123456, tzinfo=timezone.utc)


# Normalization

def test_normalize_london_payload():
    snapshot = normalize_weather(LONDON_PAYLOAD, now=FIXED_NOW)

    assert snapshot.model_dump(by_alias=True) == {
        "city": "London",
        "country": "GB",
        "temperature": 16,
        "feelsLike": 14,
        "humidity": 70,
        "pressure": 1012,
        "visibility": 8,
        "windSpeed": 3.1,
        "windDirection": 200,
        "description": "clear sky",
        "main": "Clear",
        "icon": "01d",
        "sunrise": "10:13:20 PM",
        "sunset": "6:33:20 AM",
        "timestamp": "2026-10-18T09:30:15.123Z",
    }


@pytest.mark.parametrize("value, expected", [
    (15.6, 16),
    (14.2, 14),
    (2.5, 3),
    (-2.5, -2),
    (-0.4, 0),
    (-7.6, -8),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize("value", [-10, 0, 21, 35])
def test_rounding_integer_temperature_is_idempotent(value):
    assert round_half_up(value) == value
    assert round_half_up(round_half_up(value + 0.3)) == round_half_up(value + 0.3)


@pytest.mark.parametrize("meters, km", [(10000, 10), (0, 0), (8500, 8.5), (None, None)])
def test_visibility_conversion(meters, km):
    assert meters_to_km(meters) == km
    assert type(meters_to_km(meters)) is type(km)


def test_clock_time_uses_city_offset():
    # 1700000000 is 22:13:20 UTC; Tokyo is UTC+9
    assert format_clock_time(1700000000) == "10:13:20 PM"
    assert format_clock_time(1700000000, 9 * 3600) == "7:13:20 AM"


def test_clock_time_noon_and_midnight():
    # 1699920000 is midnight UTC on 2023-11-14
    assert format_clock_time(1699920000) == "12:00:00 AM"
    assert format_clock_time(1699963200) == "12:00:00 PM"


def test_sunrise_rendered_in_local_time_when_offset_given():
    payload = copy.deepcopy(LONDON_PAYLOAD)
    payload["timezone"] = -5 * 3600
    snapshot = normalize_weather(payload, now=FIXED_NOW)
    assert snapshot.sunrise == "5:13:20 PM"
    assert snapshot.sunset == "1:33:20 AM"


def test_optional_fields_may_be_absent():
    payload = copy.deepcopy(LONDON_PAYLOAD)
    del payload["visibility"]
    del payload["wind"]
    snapshot = normalize_weather(payload, now=FIXED_NOW)
    assert snapshot.visibility is None
    assert snapshot.wind_speed is None
    assert snapshot.wind_direction is None


def test_utc_timestamp_format():
    assert utc_timestamp(FIXED_NOW) == "2026-10-18T09:30:15.123Z"
    assert utc_timestamp().endswith("Z")


# Provider client and service

def make_service(provider, **overrides):
    configured = settings.model_copy(update=overrides) if overrides else settings
    return WeatherService(OpenWeatherClient(configured, transport=provider.transport))


async def test_service_queries_provider_with_metric_units():
    provider = WeatherProviderStub()
    service = make_service(provider)

    snapshot = await service.get_current("  London ")

    assert snapshot.temperature == 16
    request = provider.requests[0]
    assert request.method == "GET"
    assert str(request.url).startswith(settings.OPENWEATHER_BASE_URL)
    assert request.url.params["q"] == "London"
    assert request.url.params["units"] == "metric"
    assert request.url.params["appid"] == settings.OPENWEATHER_API_KEY


async def test_city_is_url_encoded():
    provider = WeatherProviderStub()
    await make_service(provider).get_current("São Paulo")
    request = provider.requests[0]
    assert "S%C3%A3o" in str(request.url)
    assert request.url.params["q"] == "São Paulo"


@pytest.mark.parametrize("city", [None, "", "   "])
async def test_missing_city_makes_no_provider_call(city):
    provider = WeatherProviderStub()
    with pytest.raises(ValidationError):
        await make_service(provider).get_current(city)
    assert provider.requests == []


async def test_unknown_city_is_city_not_found():
    provider = WeatherProviderStub(status_code=404, payload={"cod": "404", "message": "city not found"})
    with pytest.raises(CityNotFound):
        await make_service(provider).get_current("Atlantis")


@pytest.mark.parametrize("status_code", [401, 429, 500, 503])
async def test_other_provider_errors(status_code):
    provider = WeatherProviderStub(status_code=status_code, payload={"message": "boom"})
    with pytest.raises(ProviderError):
        await make_service(provider).get_current("London")


async def test_malformed_payload_is_provider_error():
    provider = WeatherProviderStub(payload={"name": "London"})
    with pytest.raises(ProviderError):
        await make_service(provider).get_current("London")


@pytest.mark.parametrize("field, value", [
    ("timezone", 100000),
    ("sys", ["GB"]),
    ("main", "15.6"),
])
async def test_out_of_shape_payload_is_provider_error(field, value):
    payload = copy.deepcopy(LONDON_PAYLOAD)
    payload[field] = value
    provider = WeatherProviderStub(payload=payload)
    with pytest.raises(ProviderError):
        await make_service(provider).get_current("London")


async def test_out_of_range_sunrise_is_provider_error():
    payload = copy.deepcopy(LONDON_PAYLOAD)
    payload["sys"]["sunrise"] = 10 ** 20
    provider = WeatherProviderStub(payload=payload)
    with pytest.raises(ProviderError):
        await make_service(provider).get_current("London")


async def test_transport_failure_is_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = WeatherService(OpenWeatherClient(settings, transport=httpx.MockTransport(handler)))
    with pytest.raises(ProviderError):
        await service.get_current("London")


async def test_missing_api_key_makes_no_call():
    provider = WeatherProviderStub()
    with pytest.raises(ProviderError):
        await make_service(provider, OPENWEATHER_API_KEY=None).get_current("London")
    assert provider.requests == []


# Endpoint

def test_weather_endpoint_london(client):
    response = client.get("/api/weather", params={"city": "London"})
    assert response.status_code == 200
    data = response.json()
    timestamp = data.pop("timestamp")
    assert data == {
        "city": "London",
        "country": "GB",
        "temperature": 16,
        "feelsLike": 14,
        "humidity": 70,
        "pressure": 1012,
        "visibility": 8,
        "windSpeed": 3.1,
        "windDirection": 200,
        "description": "clear sky",
        "main": "Clear",
        "icon": "01d",
        "sunrise": "10:13:20 PM",
        "sunset": "6:33:20 AM",
    }
    assert timestamp.endswith("Z")
    assert '"visibility":8,' in response.text


def test_weather_endpoint_requires_city(client, weather_provider):
    response = client.get("/api/weather")
    assert response.status_code == 400
    assert response.json() == {"error": "City parameter is required"}
    assert weather_provider.requests == []


def test_weather_endpoint_city_not_found(client, weather_provider):
    weather_provider.status_code = 404
    weather_provider.payload = {"cod": "404", "message": "city not found"}
    response = client.get("/api/weather", params={"city": "Atlantis"})
    assert response.status_code == 404
    assert response.json() == {"error": "City not found"}


def test_weather_endpoint_provider_failure(client, weather_provider):
    weather_provider.status_code = 502
    weather_provider.payload = {"message": "bad gateway"}
    response = client.get("/api/weather", params={"city": "London"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch weather data"}


def test_weather_endpoint_bad_timezone(client, weather_provider):
    weather_provider.payload = dict(LONDON_PAYLOAD, timezone=100000)
    response = client.get("/api/weather", params={"city": "London"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch weather data"}


def test_weather_endpoint_is_public(client):
    """No credential is needed to look up weather."""
    client.cookies.clear()
    response = client.get("/api/weather", params={"city": "London"})
    assert response.status_code == 200
