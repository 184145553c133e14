"""
Persistence access for raw logs and the aggregate read model built over them.
"""

from typing import Any

from sqlalchemy import ColumnElement, Subquery, and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.models.log import AggregateKey, Log
from app.models.user import User
from app.services.log_filters import OrderByField, apply_order
from app.utils.crud import CRUDOperations


def _key_columns(model: Any) -> list:
    return [getattr(model, name) for name in AggregateKey.field_names()]


def aggregate_view() -> Subquery:
    """
    One row per distinct aggregate key.

    ``id`` is the lowest member id, so it always resolves to a real log row.
    ``events`` counts the members and ``created_at`` is the latest member's.
    """
    key_columns = _key_columns(Log)
    return (
        select(
            func.min(Log.id).label("id"),
            *key_columns,
            func.count(Log.id).label("events"),
            func.max(Log.created_at).label("created_at"),
        )
        .group_by(*key_columns)
        .subquery("log_aggregates")
    )


class LogStore(CRUDOperations[Log]):
    """Queries and commands against the ``logs`` table for one session."""

    def __init__(self, db: AsyncSession):
        super().__init__(Log, db)
        self.aggregates = aggregate_view()

    async def find_matching(self, key: AggregateKey) -> list[Log]:
        """Every log that belongs to the aggregate identified by ``key``."""
        result = await self.db.execute(select(Log).where(*key.clauses(Log)).order_by(Log.id))
        return list(result.scalars().all())

    async def delete_matching(self, key: AggregateKey) -> int:
        """Delete every log of the aggregate; returns the number of rows removed."""
        result = await self.db.execute(delete(Log).where(*key.clauses(Log)))
        return result.rowcount

    async def query_aggregates(
        self,
        where: ColumnElement[bool],
        order_by: OrderByField | None,
        offset: int,
        limit: int,
    ) -> list[dict[str, Any]]:
        """One page of aggregate rows matching ``where``."""
        view = self.aggregates
        query = apply_order(select(view).where(where), view.c, order_by)
        result = await self.db.execute(query.offset(offset).limit(limit))
        return [dict(row) for row in result.mappings().all()]

    async def count_aggregates(self, where: ColumnElement[bool]) -> int:
        """Number of aggregate rows matching ``where``, ignoring pagination."""
        result = await self.db.execute(
            select(func.count()).select_from(self.aggregates).where(where)
        )
        return result.scalar_one()

    async def fetch_details(self, log_id: int) -> dict[str, Any]:
        """
        Join one log with its owner and with every log sharing its aggregate key.

        Raises:
            NoResultFound: If the id does not exist or no user owns its API key
        """
        member = aliased(Log, name="member")
        same_key = and_(*[a == b for a, b in zip(_key_columns(member), _key_columns(Log))])

        query = (
            select(
                Log.id,
                Log.level,
                Log.api_key,
                Log.source,
                Log.title,
                Log.description,
                User.name.label("user"),
                func.count(member.id).label("events"),
                func.max(member.created_at).label("created"),
            )
            .join(User, User.api_key == Log.api_key)
            .join(member, same_key)
            .where(Log.id == log_id)
            .group_by(
                Log.id,
                Log.level,
                Log.api_key,
                Log.source,
                Log.title,
                Log.description,
                User.name,
            )
        )
        result = await self.db.execute(query)
        return dict(result.mappings().one())
