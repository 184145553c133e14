"""
Generic CRUD utilities to reduce code duplication.

Provides common CRUD patterns for database operations. Writes are flushed,
not committed: the caller owns the transaction boundary.
"""
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

ModelType = TypeVar("ModelType")


class CRUDOperations(Generic[ModelType]):
    """
    Generic CRUD operations for a model, bound to one session.

    Usage:
        class LogStore(CRUDOperations[Log]):
            def __init__(self, db: AsyncSession):
                super().__init__(Log, db)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        """
        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    async def get(self, id: Any) -> ModelType | None:
        """Get a single record by ID, or None."""
        return await self.db.get(self.model, id)

    async def save(self, db_obj: ModelType) -> ModelType:
        """
        Insert or update a record.

        The instance is flushed so store-assigned values (ids, server
        defaults) are available before commit.
        """
        self.db.add(db_obj)
        await self.db.flush()
        await self.db.refresh(db_obj)
        return db_obj

    async def count(self) -> int:
        """Count all records."""
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
