"""
Tests for CRUD operations.

This module contains tests for the user store.
"""

from app.crud.user import user as user_crud
from app.schemas.auth import UserCreate
from app.utils.security import verify_password


async def create_user(db, email="crud_test@example.com"):
    user_in = UserCreate(name="Crud Test", email=email, password="testpassword", city="Kumasi")
    return await user_crud.create(db, obj_in=user_in)


async def test_create_user(db):
    """Test creating a new user."""
    user = await create_user(db, email="Crud_Test@Example.com")

    assert user.id is not None
    assert user.email == "crud_test@example.com"
    assert user.name == "Crud Test"
    assert user.city == "Kumasi"
    assert user.profile_image == ""
    assert user.created_at is not None
    assert user.hashed_password != "testpassword"
    assert verify_password("testpassword", user.hashed_password)


async def test_get_user_by_email(db):
    """Test retrieving user by email, ignoring case."""
    created_user = await create_user(db, email="getbyemail@example.com")

    retrieved_user = await user_crud.get_by_email(db, email="GetByEmail@example.com")

    assert retrieved_user is not None
    assert retrieved_user.id == created_user.id


async def test_get_missing_user(db):
    assert await user_crud.get(db, id=12345) is None
    assert await user_crud.get_by_email(db, email="nobody@example.com") is None


async def test_update_user_partial(db):
    """Only the given columns change; unknown keys are ignored."""
    user = await create_user(db)
    original_hash = user.hashed_password

    updated = await user_crud.update(
        db, db_obj=user, obj_in={"name": "Renamed", "city": "Tamale", "not_a_column": "x"}
    )

    assert updated.name == "Renamed"
    assert updated.city == "Tamale"
    assert updated.email == "crud_test@example.com"
    assert updated.hashed_password == original_hash
    assert not hasattr(updated, "not_a_column")


async def test_update_password(db):
    user = await create_user(db)

    await user_crud.update_password(db, db_obj=user, new_password="brand-new-pass")

    reloaded = await user_crud.get(db, id=user.id)
    assert verify_password("brand-new-pass", reloaded.hashed_password)
    assert not verify_password("testpassword", reloaded.hashed_password)
