"""
Profile schemas.

Request bodies for the profile endpoints. Presence and length rules are
enforced by ProfileService so that they surface as 400 errors with
specific messages.
"""

from typing import Optional

from app.schemas.base import CamelSchema


class PasswordChange(CamelSchema):
    """Body of PUT /profile/change-password."""
    current_password: Optional[str] = None
    new_password: Optional[str] = None
