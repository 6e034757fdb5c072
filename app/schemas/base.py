"""
Base Pydantic schemas.

This module contains base schemas with common configuration that other
schemas inherit from.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema for models read from ORM objects.

    All other schemas should inherit from this class.
    """

    model_config = ConfigDict(from_attributes=True)


class CamelSchema(BaseSchema):
    """
    Schema exposed to the web client with camelCase field names.

    Accepts either spelling on input and serializes with camelCase aliases.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(BaseModel):
    """Plain success envelope."""
    message: str
