"""
Request rate limiting.

A single slowapi Limiter shared by the application and all routers so
that one switch (RATE_LIMIT_ENABLED) governs every limit.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)

DEFAULT_LIMIT = f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW}seconds"
