"""
UI dependencies for authentication and session management.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db, load_session_user


class UIUser:
    """Represents the current UI user from session."""

    def __init__(self, user_id: UUID, email: str, full_name: str):
        self.id = user_id
        self.user_id = user_id
        self.email = email
        self.full_name = full_name


async def get_optional_ui_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[UIUser]:
    """
    Get current user from session cookie, or None if not authenticated.

    Use this for pages like login where we want to check if already logged in.
    """
    user = await load_session_user(request, db)
    if user is None:
        return None
    return UIUser(user_id=user.id, email=user.email, full_name=user.full_name)


async def get_current_ui_user(
    user: Optional[UIUser] = Depends(get_optional_ui_user),
) -> UIUser:
    """
    Get current user from session cookie.

    If session is invalid or missing, raises HTTPException with redirect.
    Use this dependency in all UI routes that require authentication.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Not authenticated",
            headers={"Location": "/login"},
        )
    return user
