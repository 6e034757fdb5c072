"""
Weather router.

Public endpoint returning current conditions for a city.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.dependencies.services import get_weather_service
from app.schemas.weather import WeatherSnapshot
from app.services.weather import WeatherService
from app.utils.rate_limit import DEFAULT_LIMIT, limiter

router = APIRouter(
    prefix="/weather",
    tags=["weather"],
    responses={
        400: {"description": "City parameter missing"},
        404: {"description": "City not found"},
    },
)


@router.get("", response_model=WeatherSnapshot)
@limiter.limit(DEFAULT_LIMIT)
async def get_current_weather(
    request: Request,
    city: Optional[str] = Query(None, description="City name, e.g. London"),
    service: WeatherService = Depends(get_weather_service),
):
    """
    Get current weather for a city.

    **Note:** This endpoint is publicly accessible (no authentication required).
    """
    return await service.get_current(city)
