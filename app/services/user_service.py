"""User Service - Business Logic Layer"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.core.security import get_password_hash, verify_password
from app.database import store_errors
from app.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user-related operations"""

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: str,
        password: str,
        full_name: str,
    ) -> User:
        """
        Register a new account.

        Raises:
            ConflictError: email already registered
        """
        existing = await UserService.get_user_by_email(db, email)
        if existing:
            raise ConflictError("A user with this email already exists", field="email")

        db_user = User(
            email=email.lower(),
            hashed_password=get_password_hash(password),
            full_name=full_name,
            is_active=True,
        )
        with store_errors():
            db.add(db_user)
            await db.commit()
            await db.refresh(db_user)

        logger.info("User %s registered", db_user.id)
        return db_user

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        """
        Get user by ID.

        Args:
            db: Database session
            user_id: User ID

        Returns:
            User or None if not found
        """
        with store_errors():
            result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        """Case-insensitive email lookup."""
        with store_errors():
            result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User if the credentials match an active account, None otherwise
        """
        user = await UserService.get_user_by_email(db, email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user
