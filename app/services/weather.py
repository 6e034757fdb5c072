"""
Current weather lookup.

Fetches current conditions from OpenWeatherMap and reshapes the response
into the WeatherSnapshot the dashboard renders.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

import httpx
from pydantic import ValidationError as SchemaValidationError

from app.config import Settings
from app.core.exceptions import CityNotFound, ProviderError, ValidationError
from app.schemas.weather import WeatherSnapshot
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def meters_to_km(meters: Optional[float]) -> Optional[Union[int, float]]:
    if meters is None:
        return None
    km = meters / 1000
    return int(km) if km.is_integer() else km


def format_clock_time(epoch_seconds: int, utc_offset_seconds: int = 0) -> str:
    """
    Render an epoch time as a 12-hour clock string, e.g. "6:05:09 AM".

    Args:
        epoch_seconds: Unix time
        utc_offset_seconds: Offset of the target time zone east of UTC
    """
    tz = timezone(timedelta(seconds=utc_offset_seconds))
    moment = datetime.fromtimestamp(epoch_seconds, tz=tz)
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_weather(payload: Dict[str, Any], now: Optional[datetime] = None) -> WeatherSnapshot:
    """
    Map an OpenWeatherMap current-weather payload to a WeatherSnapshot.

    Sunrise and sunset are shown in the city's local time when the payload
    carries its UTC offset, otherwise in UTC.

    Raises:
        KeyError, IndexError, TypeError, AttributeError: If required fields are
            missing or have the wrong shape
        ValueError, OverflowError, OSError: If offsets or epochs are out of range
    """
    main = payload["main"]
    sys_info = payload["sys"]
    wind = payload.get("wind") or {}
    condition = payload["weather"][0]
    offset = payload.get("timezone") or 0

    return WeatherSnapshot(
        city=payload["name"],
        country=sys_info.get("country"),
        temperature=round_half_up(main["temp"]),
        feels_like=round_half_up(main["feels_like"]),
        humidity=main.get("humidity"),
        pressure=main.get("pressure"),
        visibility=meters_to_km(payload.get("visibility")),
        wind_speed=wind.get("speed"),
        wind_direction=wind.get("deg"),
        description=condition["description"],
        main=condition["main"],
        icon=condition["icon"],
        sunrise=format_clock_time(sys_info["sunrise"], offset),
        sunset=format_clock_time(sys_info["sunset"], offset),
        timestamp=utc_timestamp(now),
    )


class OpenWeatherClient:
    """
    Thin client for the OpenWeatherMap current-weather endpoint.

    One GET per call; no caching and no retries.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    async def fetch_current(self, city: str) -> Dict[str, Any]:
        """
        Fetch the raw current-weather payload for a city.

        Raises:
            CityNotFound: If the provider answers 404
            ProviderError: For any other failure, including a missing API key
        """
        api_key = self.settings.OPENWEATHER_API_KEY
        if not api_key:
            logger.error("Weather lookup attempted but OPENWEATHER_API_KEY is not configured")
            raise ProviderError()

        params = {"q": city, "appid": api_key, "units": "metric"}
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            ) as client:
                response = await client.get(self.settings.OPENWEATHER_BASE_URL, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Weather provider request failed for '{city}': {e}")
            raise ProviderError()

        if response.status_code == 404:
            logger.warning(f"Weather provider does not know city: {city}")
            raise CityNotFound()
        if response.is_error:
            logger.error(f"Weather API error: {response.status_code} for '{city}'")
            raise ProviderError()

        try:
            return response.json()
        except ValueError:
            logger.error(f"Weather provider returned non-JSON body for '{city}'")
            raise ProviderError()


class WeatherService:
    """Weather lookup flow: validate the city, fetch, normalize."""

    def __init__(self, client: OpenWeatherClient):
        self.client = client

    async def get_current(self, city: Optional[str]) -> WeatherSnapshot:
        if not city or not city.strip():
            raise ValidationError("City parameter is required")
        city = city.strip()

        payload = await self.client.fetch_current(city)
        try:
            snapshot = normalize_weather(payload)
        except (KeyError, IndexError, TypeError, AttributeError, ValueError,
                OverflowError, OSError, SchemaValidationError) as e:
            logger.error(f"Unexpected weather payload for '{city}': {e!r}")
            raise ProviderError()

        logger.info(f"Current weather for {snapshot.city}: {snapshot.temperature}°C, {snapshot.description}")
        return snapshot
