# CRUD operations package

from app.crud.base import CRUDBase
from app.crud.user import CRUDUser, user

__all__ = [
    "CRUDBase",
    "CRUDUser", "user",
]
