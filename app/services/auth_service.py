"""
Authentication service for staff login.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import verify_password
from app.errors import DuplicateMember
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import UserCreate
from app.services.operation import domain_operation

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repository = UserRepository(db)

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate a staff user by email and password.

        Returns:
            User object if authentication successful, None otherwise
        """
        user = await self.user_repository.get_by_email(email)

        if not user:
            return None

        if not user.is_active:
            return None

        if not verify_password(password, user.hashed_password):
            logger.info("Failed login for %s", email)
            return None

        return user

    @domain_operation("Could not create the user")
    async def create_user(self, data: UserCreate) -> User:
        if await self.user_repository.get_by_email(data.email):
            raise DuplicateMember("A user with this email already exists")

        user = await self.user_repository.create(data)
        await self.db.commit()
        logger.info("Created user %s", user.email)
        return user
