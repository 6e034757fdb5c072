"""
Authentication router.

This module contains registration, login, logout and current-user
endpoints. Login issues an HTTP-only cookie carrying the access token.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from app.config import Settings, get_settings
from app.dependencies.auth import get_current_claim
from app.dependencies.services import get_account_service
from app.schemas.auth import TokenClaim, UserCreate, UserLogin, UserPublic, UserResponse
from app.schemas.base import MessageResponse
from app.services.account import AccountService
from app.utils.rate_limit import limiter

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={401: {"description": "Unauthorized"}},
)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/hour")
async def register_user(
    request: Request,
    user_in: UserCreate,
    service: AccountService = Depends(get_account_service),
):
    """
    Register a new user.

    Rate limit: 10 requests per hour

    Raises:
        400: If the email is already registered or a field is invalid
    """
    new_user = await service.register(user_in)
    return UserResponse(message="User created successfully", user=new_user)


@router.post("/login", response_model=UserResponse)
@limiter.limit("5/minute")  # Strict limit to prevent brute force attacks
async def login(
    request: Request,
    response: Response,
    credentials: UserLogin,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
):
    """
    Authenticate with email and password.

    On success the access token is set as an HTTP-only cookie and the
    public user is returned.

    Rate limit: 5 requests per minute
    """
    token, user = await service.login(credentials)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
        path="/",
    )
    return UserResponse(message="Login successful", user=user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    """Clear the auth cookie."""
    response.delete_cookie(key=settings.AUTH_COOKIE_NAME, path="/")
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserPublic)
@limiter.limit("30/minute")
async def get_current_user_info(
    request: Request,
    claim: TokenClaim = Depends(get_current_claim),
    service: AccountService = Depends(get_account_service),
):
    """
    Get the authenticated user's profile.

    Rate limit: 30 requests per minute
    """
    return await service.get_profile(claim.user_id)
