"""
Profile router.

Authenticated endpoints for editing the profile and changing the password.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from app.config import Settings, get_settings
from app.dependencies.auth import get_current_claim
from app.dependencies.services import get_profile_service
from app.schemas.auth import TokenClaim, UserResponse
from app.schemas.base import MessageResponse
from app.schemas.profile import PasswordChange
from app.services.profile import ImagePayload, ProfileService
from app.utils.rate_limit import limiter

router = APIRouter(
    prefix="/profile",
    tags=["profile"],
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "User not found"},
    },
)


@router.put("/update", response_model=UserResponse)
@limiter.limit("20/minute")
async def update_profile(
    request: Request,
    name: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    profileImage: Optional[UploadFile] = File(None),
    claim: TokenClaim = Depends(get_current_claim),
    service: ProfileService = Depends(get_profile_service),
    settings: Settings = Depends(get_settings),
):
    """
    Update name, city and optionally the profile image.

    Multipart form fields: `name`, `city`, optional `profileImage` file.
    The image is cropped to a 300x300 square by the image host. If the
    upload fails nothing is saved.

    Rate limit: 20 requests per minute
    """
    # One byte past the limit is enough for the size check to reject it
    image = None
    if profileImage is not None:
        image = ImagePayload(
            data=await profileImage.read(settings.MAX_IMAGE_BYTES + 1),
            filename=profileImage.filename or "profile-image",
            content_type=profileImage.content_type,
        )

    user = await service.update_profile(claim.user_id, name, city, image)
    return UserResponse(message="Profile updated successfully", user=user)


@router.put("/change-password", response_model=MessageResponse)
@limiter.limit("5/minute")
async def change_password(
    request: Request,
    body: PasswordChange,
    claim: TokenClaim = Depends(get_current_claim),
    service: ProfileService = Depends(get_profile_service),
):
    """
    Change the password after verifying the current one.

    JSON body: `{"currentPassword": ..., "newPassword": ...}`

    Rate limit: 5 requests per minute
    """
    await service.change_password(claim.user_id, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")
