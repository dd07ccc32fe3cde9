"""
FastAPI dependencies for the application.

Shared objects (database, storage, view versions, session signer, settings)
are created by the application factory and kept on app.state; these
dependencies hand them to routes and build the per-request services.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.db.session import get_db
from app.errors import raise_app_error
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.file_storage import FileStorage
from app.services.member_import_service import MemberImportService
from app.services.member_service import MemberService
from app.services.referral_service import ReferralService
from app.services.resume_service import ResumeService
from app.services.stage_service import StageService
from app.services.view_invalidation import ViewInvalidator
from app.ui.session import SessionManager

__all__ = [
    "get_db",
    "get_settings_dep",
    "get_storage",
    "get_views",
    "get_session_manager",
    "get_current_api_user",
    "get_member_service",
    "get_stage_service",
    "get_referral_service",
    "get_import_service",
    "get_resume_service",
]


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> FileStorage:
    return request.app.state.storage


def get_views(request: Request) -> ViewInvalidator:
    return request.app.state.views


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


async def load_session_user(request: Request, db: AsyncSession) -> Optional[User]:
    """Active user referenced by the session cookie, or None."""
    manager: SessionManager = request.app.state.session_manager
    token = request.cookies.get(manager.cookie_name)
    if not token:
        return None

    session_data = manager.verify_session_token(token)
    if not session_data:
        return None

    try:
        user_id = UUID(session_data["user_id"])
    except (KeyError, ValueError):
        return None

    user = await UserRepository(db).get_by_id(user_id)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_api_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get the current authenticated user for JSON API routes.

    Raises:
        401: If the session cookie is missing, invalid, expired or the user is gone
    """
    user = await load_session_user(request, db)
    if user is None:
        raise_app_error(
            status.HTTP_401_UNAUTHORIZED,
            "UNAUTHORIZED",
            "Authentication required",
        )
    return user


def get_member_service(
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    views: ViewInvalidator = Depends(get_views),
    settings: Settings = Depends(get_settings_dep),
) -> MemberService:
    return MemberService(db, storage=storage, views=views, settings=settings)


def get_stage_service(
    db: AsyncSession = Depends(get_db),
    views: ViewInvalidator = Depends(get_views),
) -> StageService:
    return StageService(db, views=views)


def get_referral_service(
    db: AsyncSession = Depends(get_db),
    views: ViewInvalidator = Depends(get_views),
) -> ReferralService:
    return ReferralService(db, views=views)


def get_import_service(
    db: AsyncSession = Depends(get_db),
    views: ViewInvalidator = Depends(get_views),
) -> MemberImportService:
    return MemberImportService(db, views=views)


def get_resume_service(
    storage: FileStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings_dep),
) -> ResumeService:
    return ResumeService(storage, settings)
