"""
Authentication router for the JSON API.

Uses the same signed session cookie as the dashboard.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_api_user, get_db, get_session_manager
from app.errors import raise_app_error
from app.models.user import User
from app.schemas.user import LoginRequest, UserRead
from app.services.auth_service import AuthService
from app.ui.session import SessionManager

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def set_session_cookie(response: Response, manager: SessionManager, user: User) -> None:
    token = manager.create_session_token(user.id, user.email)
    response.set_cookie(
        key=manager.cookie_name,
        value=token,
        httponly=True,
        max_age=manager.max_age,
        samesite="lax",
    )


@router.post("/login", response_model=UserRead)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    manager: SessionManager = Depends(get_session_manager),
):
    """Authenticate a staff user and start a session."""
    user = await AuthService(db).authenticate_user(credentials.email, credentials.password)

    if not user:
        raise_app_error(
            status.HTTP_401_UNAUTHORIZED,
            "UNAUTHORIZED",
            "Incorrect email or password",
        )

    set_session_cookie(response, manager, user)
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
):
    response.delete_cookie(manager.cookie_name)


@router.get("/me", response_model=UserRead)
async def get_current_user_info(current_user: User = Depends(get_current_api_user)):
    """
    Get information about the currently authenticated user.
    """
    return current_user
