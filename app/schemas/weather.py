"""
Weather schemas.

The snapshot returned to the dashboard after normalizing a provider
response.
"""

from typing import Optional, Union

from pydantic import Field

from app.schemas.base import CamelSchema

Number = Union[int, float]


class WeatherSnapshot(CamelSchema):
    """
    Current conditions for a city.

    Temperatures are whole degrees Celsius, visibility is in kilometres,
    sunrise/sunset are clock strings and timestamp is ISO 8601 UTC.
    """
    city: str
    country: Optional[str] = None
    temperature: int = Field(..., description="Temperature in °C, rounded")
    feels_like: int = Field(..., description="Apparent temperature in °C, rounded")
    humidity: Optional[Number] = Field(None, description="Relative humidity (%)")
    pressure: Optional[Number] = Field(None, description="Pressure (hPa)")
    visibility: Optional[Number] = Field(None, description="Visibility (km)")
    wind_speed: Optional[Number] = Field(None, description="Wind speed (m/s)")
    wind_direction: Optional[Number] = Field(None, description="Wind direction (degrees)")
    description: str
    main: str
    icon: str
    sunrise: str
    sunset: str
    timestamp: str
