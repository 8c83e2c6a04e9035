# File: app/schemas/user.py
"""
Schemas for the demo user directory.
"""

from typing import List

from app.core.permissions import Role
from app.schemas.common import CamelModel


class UserRead(CamelModel):
    """A selectable demo identity."""

    id: str
    name: str
    role: Role


class UserListResponse(CamelModel):
    users: List[UserRead]
