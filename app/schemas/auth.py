"""
Authentication schemas.

This module contains Pydantic schemas for registration, login and the
public user projection.
"""

import re
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import CITY_MAX_LENGTH, NAME_MAX_LENGTH
from app.schemas.base import BaseSchema, CamelSchema

PASSWORD_MIN_LENGTH = 6

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")


class TokenClaim(BaseModel):
    """Verified access token payload."""
    user_id: int
    expires_at: Optional[int] = None


class UserCreate(BaseSchema):
    """Schema for registering a new user."""
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    city: str = Field(..., min_length=1, max_length=CITY_MAX_LENGTH)

    @field_validator("name", "city")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please provide a valid email")
        return v


class UserLogin(BaseSchema):
    """Schema for logging in with email and password."""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserPublic(CamelSchema):
    """User fields that are safe to return to the client."""
    id: int
    name: str
    email: str
    city: str
    profile_image: str = ""

    @field_validator("profile_image", mode="before")
    @classmethod
    def default_image(cls, v: Optional[str]) -> str:
        return v or ""


class UserResponse(BaseModel):
    """Envelope carrying a message and the public user."""
    message: str
    user: UserPublic
