"""
User CRUD operations.

This module contains CRUD operations specific to user management.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.auth import UserCreate
from app.utils.security import get_password_hash


class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):
    """
    CRUD operations for User model.
    """

    async def create(self, db: AsyncSession, *, obj_in: UserCreate) -> User:
        """
        Create a new user with a hashed password.

        Args:
            db: Database session
            obj_in: Validated registration data

        Returns:
            Created user instance
        """
        db_obj = User(
            name=obj_in.name,
            email=obj_in.email.lower(),
            hashed_password=get_password_hash(obj_in.password),
            city=obj_in.city,
            profile_image="",
        )
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            db: Database session
            email: User email address (matched case-insensitively)

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalars().first()

    async def update_password(self, db: AsyncSession, *, db_obj: User, new_password: str) -> User:
        """
        Replace a user's password hash.

        Args:
            db: Database session
            db_obj: User to update
            new_password: Plain text password to hash and store

        Returns:
            Updated user instance
        """
        return await self.update(
            db, db_obj=db_obj, obj_in={"hashed_password": get_password_hash(new_password)}
        )


# Create instance of CRUDUser
user = CRUDUser(User)
