"""
Authentication dependencies.

This module contains dependency injection functions that turn the request
credential into a verified TokenClaim.
"""

from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import Settings, get_settings
from app.schemas.auth import TokenClaim
from app.utils.security import verify_access_token

# Bearer header fallback for non-browser clients; shown in Swagger UI
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_from_request(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """
    Extract the access token from the request.

    The auth cookie set at login takes precedence over an
    Authorization: Bearer header.

    Args:
        request: FastAPI request object
        bearer: Parsed Authorization header, if any
        settings: Application settings

    Returns:
        Token string, or None if the request carries no credential
    """
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if bearer is not None:
        return bearer.credentials
    return None


async def get_current_claim(
    token: Optional[str] = Depends(get_token_from_request),
    settings: Settings = Depends(get_settings),
) -> TokenClaim:
    """
    Verify the request credential.

    Raises:
        Unauthenticated: If no token was sent
        InvalidToken: If the token does not verify
    """
    return verify_access_token(token, settings.jwt_secret, settings.ALGORITHM)
