"""
User database model.

This module contains the User model holding account and profile fields.
"""

from sqlalchemy import Column, String

from app.models.base import BaseModel

NAME_MAX_LENGTH = 60
CITY_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255


class User(BaseModel):
    """
    Registered user of the weather application.

    The email is stored lower-cased and is unique; the password is only
    ever stored as a bcrypt hash.
    """

    __tablename__ = "users"

    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    city = Column(String(CITY_MAX_LENGTH), nullable=False)
    profile_image = Column(String, nullable=False, default="", server_default="")
