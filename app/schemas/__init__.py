# Pydantic schemas package

from app.schemas.base import BaseSchema, CamelSchema, MessageResponse
from app.schemas.auth import (
    TokenClaim, UserCreate, UserLogin, UserPublic, UserResponse
)
from app.schemas.profile import PasswordChange
from app.schemas.weather import WeatherSnapshot

__all__ = [
    # Base schemas
    "BaseSchema", "CamelSchema", "MessageResponse",

    # Auth schemas
    "TokenClaim", "UserCreate", "UserLogin", "UserPublic", "UserResponse",

    # Profile schemas
    "PasswordChange",

    # Weather schemas
    "WeatherSnapshot",
]
