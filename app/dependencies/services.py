"""
Service dependencies.

Factories that build each flow with its collaborators for one request.
Tests replace the uploader and weather client through
app.dependency_overrides.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.database import get_db
from app.services.account import AccountService
from app.services.image_upload import CloudinaryUploader, ImageUploader
from app.services.profile import ProfileService
from app.services.weather import OpenWeatherClient, WeatherService


def get_image_uploader(settings: Settings = Depends(get_settings)) -> ImageUploader:
    return CloudinaryUploader(settings)


def get_weather_client(settings: Settings = Depends(get_settings)) -> OpenWeatherClient:
    return OpenWeatherClient(settings)


def get_account_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(db, settings)


def get_profile_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    uploader: ImageUploader = Depends(get_image_uploader),
) -> ProfileService:
    return ProfileService(db, settings, uploader)


def get_weather_service(
    client: OpenWeatherClient = Depends(get_weather_client),
) -> WeatherService:
    return WeatherService(client)
