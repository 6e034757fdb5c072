"""
Account flows: registration, login and current-user lookup.
"""

from datetime import timedelta
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.exceptions import EmailAlreadyRegistered, InvalidCredentials, NotFound
from app.crud.user import CRUDUser, user as user_crud
from app.schemas.auth import UserCreate, UserLogin, UserPublic
from app.utils.logging_config import get_logger
from app.utils.security import create_access_token, verify_password

logger = get_logger(__name__)


class AccountService:
    """Registration and authentication against the user store."""

    def __init__(self, db: AsyncSession, settings: Settings, users: CRUDUser = user_crud):
        self.db = db
        self.settings = settings
        self.users = users

    async def register(self, user_in: UserCreate) -> UserPublic:
        if await self.users.get_by_email(self.db, email=user_in.email):
            raise EmailAlreadyRegistered()

        try:
            new_user = await self.users.create(self.db, obj_in=user_in)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.db.rollback()
            raise EmailAlreadyRegistered()
        logger.info(f"Registered user {new_user.id}")
        return UserPublic.model_validate(new_user)

    async def login(self, credentials: UserLogin) -> Tuple[str, UserPublic]:
        """
        Check credentials and issue an access token.

        Returns:
            The signed token and the public user

        Raises:
            InvalidCredentials: Unknown email or wrong password
        """
        db_user = await self.users.get_by_email(self.db, email=credentials.email)
        if db_user is None or not verify_password(credentials.password, db_user.hashed_password):
            logger.warning(f"Failed login attempt for {credentials.email}")
            raise InvalidCredentials()

        token = create_access_token(
            db_user.id,
            secret=self.settings.jwt_secret,
            algorithm=self.settings.ALGORITHM,
            expires_delta=timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        return token, UserPublic.model_validate(db_user)

    async def get_profile(self, user_id: int) -> UserPublic:
        db_user = await self.users.get(self.db, id=user_id)
        if db_user is None:
            raise NotFound()
        return UserPublic.model_validate(db_user)
