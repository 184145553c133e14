"""
User directory: API key issuance and validation.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import mask_api_key
from app.models.user import User, generate_api_key
from app.utils.crud import CRUDOperations

logger = logging.getLogger(__name__)


class UserService:
    """Lookups against the users that own API keys."""

    async def get_by_api_key(self, db: AsyncSession, api_key: str) -> User | None:
        """Return the active user owning ``api_key``, if any."""
        result = await db.execute(
            select(User).where(User.api_key == api_key, User.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def is_valid_api_key(self, db: AsyncSession, api_key: str | None) -> bool:
        if not api_key or not api_key.strip():
            return False
        return await self.get_by_api_key(db, api_key) is not None

    async def create_user(self, db: AsyncSession, name: str, email: str) -> User:
        """
        Create a user and issue its API key.

        Raises:
            IntegrityError: If the email is already registered
        """
        user = await CRUDOperations(User, db).save(
            User(name=name, email=email, api_key=generate_api_key())
        )
        await db.commit()
        logger.info(f"Issued API key {mask_api_key(user.api_key)} to user {user.id}")
        return user


# Global service instance
user_service = UserService()
