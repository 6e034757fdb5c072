"""
Profile management flows.

Profile update and password change for an authenticated user. Both load
the user, validate, perform at most one side effect, and write once.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.exceptions import InvalidCredentials, NotFound, ValidationError
from app.crud.user import CRUDUser, user as user_crud
from app.models.user import CITY_MAX_LENGTH, NAME_MAX_LENGTH, User
from app.schemas.auth import PASSWORD_MIN_LENGTH, UserPublic
from app.services.image_upload import ImageUploader
from app.utils.logging_config import get_logger
from app.utils.security import verify_password

logger = get_logger(__name__)


@dataclass
class ImagePayload:
    """An uploaded image file as received from the client."""
    data: bytes
    filename: str = "profile-image"
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


class ProfileService:
    """
    Profile update and password change for one request.

    Args:
        db: Database session
        settings: Application settings
        uploader: Image host used for profile pictures
        users: User store
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        uploader: ImageUploader,
        users: CRUDUser = user_crud,
    ):
        self.db = db
        self.settings = settings
        self.uploader = uploader
        self.users = users

    async def _load_user(self, user_id: int) -> User:
        db_user = await self.users.get(self.db, id=user_id)
        if db_user is None:
            logger.warning(f"Authenticated user {user_id} no longer exists")
            raise NotFound()
        return db_user

    def _check_image(self, image: ImagePayload) -> None:
        if image.content_type and not image.content_type.startswith("image/"):
            raise ValidationError("Profile image must be an image file")
        if image.size > self.settings.MAX_IMAGE_BYTES:
            limit_mb = self.settings.MAX_IMAGE_BYTES / (1024 * 1024)
            raise ValidationError(f"Profile image must be smaller than {limit_mb:g} MB")

    async def update_profile(
        self,
        user_id: int,
        name: Optional[str],
        city: Optional[str],
        image: Optional[ImagePayload] = None,
    ) -> UserPublic:
        """
        Update name, city and optionally the profile image.

        The image is uploaded before anything is written; if the upload
        fails the user record is left untouched.

        Returns:
            Public projection of the updated user

        Raises:
            ValidationError: Missing or over-long name/city, or a bad image
            NotFound: If the user does not exist
            UploadError: If the image host fails
        """
        name = (name or "").strip()
        city = (city or "").strip()
        if not name or not city:
            raise ValidationError("Name and city are required")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(f"Name cannot be more than {NAME_MAX_LENGTH} characters")
        if len(city) > CITY_MAX_LENGTH:
            raise ValidationError(f"City name cannot be more than {CITY_MAX_LENGTH} characters")

        db_user = await self._load_user(user_id)

        profile_image = db_user.profile_image or ""
        if image is not None and image.size > 0:
            self._check_image(image)
            profile_image = await self.uploader.upload(
                image.data,
                filename=image.filename,
                folder=self.settings.profile_image_folder,
                size=self.settings.PROFILE_IMAGE_SIZE,
            )

        updated = await self.users.update(
            self.db,
            db_obj=db_user,
            obj_in={"name": name, "city": city, "profile_image": profile_image},
        )
        logger.info(f"Profile updated for user {user_id}")
        return UserPublic.model_validate(updated)

    async def change_password(
        self,
        user_id: int,
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        """
        Replace the user's password after checking the current one.

        Raises:
            ValidationError: Missing fields or a new password that is too short
            NotFound: If the user does not exist
            InvalidCredentials: If the current password does not match
        """
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        if len(new_password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"New password must be at least {PASSWORD_MIN_LENGTH} characters long"
            )

        db_user = await self._load_user(user_id)
        if not verify_password(current_password, db_user.hashed_password):
            logger.warning(f"Password change rejected for user {user_id}: wrong current password")
            raise InvalidCredentials("Current password is incorrect")

        await self.users.update_password(self.db, db_obj=db_user, new_password=new_password)
        logger.info(f"Password changed for user {user_id}")
