# File: app/api/endpoints/users.py
"""
Demo user directory.

Lists the identities a client can switch between. Nothing here is
authenticated; the directory only feeds the client's user picker.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_settings
from app.core.config import Settings
from app.schemas.user import UserListResponse, UserRead

router = APIRouter()


@router.get("", response_model=UserListResponse)
def list_users(*, settings: Settings = Depends(get_settings)) -> UserListResponse:
    """List the configured demo users."""
    return UserListResponse(
        users=[UserRead.model_validate(user.model_dump()) for user in settings.DEMO_USERS]
    )
