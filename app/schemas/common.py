# File: app/schemas/common.py
"""
Shared schema configuration for DocNotes.

API payloads use camelCase field names. Models accept snake_case on input as
well and can be built straight from ORM objects.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def ensure_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; all stored times are UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str
