"""
Shared test fixtures.

Every test gets a fresh SQLite database file. The FastAPI app is pointed
at it through dependency overrides, and the image host and weather
provider are replaced with in-process stand-ins.
"""

import os
import tempfile

# Settings are read at import time, so the environment must be set first.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("OPENWEATHER_API_KEY", "test-openweather-key")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo")
os.environ.setdefault("CLOUDINARY_API_KEY", "123456789")
os.environ.setdefault("CLOUDINARY_API_SECRET", "cloudinary-secret")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="weather-api-logs-"))

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

import app.models  # noqa: F401
from app.config import settings
from app.core.exceptions import UploadError
from app.database import Base, get_db
from app.dependencies.services import get_image_uploader, get_weather_client
from app.main import app
from app.services.weather import OpenWeatherClient

UPLOADED_IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/v1/weather-app/profiles/avatar.jpg"

LONDON_PAYLOAD = {
    "name": "London",
    "sys": {"country": "GB", "sunrise": 1700000000, "sunset": 1700030000},
    "main": {"temp": 15.6, "feels_like": 14.2, "humidity": 70, "pressure": 1012},
    "visibility": 8000,
    "wind": {"speed": 3.1, "deg": 200},
    "weather": [{"description": "clear sky", "main": "Clear", "icon": "01d"}],
}


class StubUploader:
    """Image uploader that records calls and optionally fails."""

    def __init__(self, fail: bool = False, url: str = UPLOADED_IMAGE_URL):
        self.fail = fail
        self.url = url
        self.calls = []

    async def upload(self, data, *, filename, folder, size):
        self.calls.append({"data": data, "filename": filename, "folder": folder, "size": size})
        if self.fail:
            raise UploadError()
        return self.url


class WeatherProviderStub:
    """httpx handler standing in for OpenWeatherMap."""

    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self.payload = LONDON_PAYLOAD if payload is None else payload
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def db_url(tmp_path):
    """Create the schema in a temporary SQLite file and return its async URL."""
    path = tmp_path / "test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def session_factory(db_url):
    engine = create_async_engine(db_url, poolclass=NullPool)
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """Async session for service and CRUD tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def uploader():
    return StubUploader()


@pytest.fixture
def weather_provider():
    return WeatherProviderStub()


@pytest.fixture
def client(session_factory, uploader, weather_provider):
    """Test client wired to the temporary database and stubbed services."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_uploader] = lambda: uploader
    app.dependency_overrides[get_weather_client] = lambda: OpenWeatherClient(
        settings, transport=weather_provider.transport
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_user(client, email="jane@example.com", password="secret123", name="Jane", city="London"):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "city": city},
    )
    assert response.status_code == 201, response.text
    return response.json()["user"]


def login_user(client, email="jane@example.com", password="secret123"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["user"]


@pytest.fixture
def logged_in_client(client):
    """Client holding the auth cookie of a freshly registered user."""
    register_user(client)
    login_user(client)
    return client
