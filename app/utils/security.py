"""
Security utilities.

This module contains security-related utility functions for password hashing
and access token operations.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.exceptions import InvalidToken, Unauthenticated
from app.schemas.auth import TokenClaim
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_access_token(
    user_id: int,
    secret: str,
    algorithm: str = "HS256",
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create JWT access token for a user.

    Args:
        user_id: Id of the user the token authorizes
        secret: Signing key
        algorithm: JWT signing algorithm
        expires_delta: Token lifetime (defaults to one day)

    Returns:
        Encoded JWT token
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=1))
    to_encode = {"sub": str(user_id), "userId": user_id, "exp": expire}
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def verify_access_token(
    token: Optional[str],
    secret: str,
    algorithm: str = "HS256",
) -> TokenClaim:
    """
    Verify and decode JWT token.

    Args:
        token: Encoded token, or None when the request carried none
        secret: Signing key
        algorithm: Expected signing algorithm

    Returns:
        Claim carrying the authorized user id

    Raises:
        Unauthenticated: If no token was supplied
        InvalidToken: If the token is malformed, expired or wrongly signed
    """
    if not token:
        raise Unauthenticated()

    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        raise InvalidToken()

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        logger.debug(f"Token subject is not a user id: {subject!r}")
        raise InvalidToken()

    return TokenClaim(user_id=user_id, expires_at=payload.get("exp"))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password.

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    return pwd_context.hash(password)
