# File: app/db/models/base.py
"""
Base models and mixins for DocNotes.

This module provides the foundation for all database models in the system:
- Base SQLAlchemy model class
- Timestamp mixin maintained on insert and update
- Identifier helpers for store-generated string ids
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, MetaData
from sqlalchemy.orm import declarative_base

# Create the SQLAlchemy base
Base = declarative_base(metadata=MetaData())


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Opaque, store-generated identifier."""
    return str(uuid.uuid4())


class TimestampMixin:
    """
    Mixin providing automatic timestamp functionality.

    Adds created_at and updated_at timestamps that are automatically
    maintained when records are created or updated.
    """

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

