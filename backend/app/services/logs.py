"""
Log service: ingestion, aggregate search, details and bulk lifecycle operations.

Usage:
    from app.services.logs import log_service

    page = await log_service.search_logs(db, status=Status.ACTIVE, offset=0, limit=20)
    await log_service.archive_by_id(db, [page.items[0].id])
"""

from collections.abc import Sequence

from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidAPIKeyError, LogNotFoundError
from app.core.logging import LogHelper, mask_api_key
from app.db.session import unit_of_work
from app.models.log import AggregateKey, Environment, Log, Status
from app.schemas.log import LogAggregateResponse, LogCreate, LogDetails, LogResponse, Page
from app.services.log_filters import OrderByField, SearchCriteria, SearchTarget, build_filters
from app.services.log_store import LogStore
from app.services.users import UserService, user_service

audit = LogHelper(__name__)


class LogService:
    """Operations over raw logs and the aggregates they form."""

    def __init__(self, users: UserService = user_service):
        self.users = users

    async def save(self, db: AsyncSession, data: LogCreate) -> LogResponse:
        """
        Store one log event after checking its API key.

        Raises:
            InvalidAPIKeyError: If no active user owns the key
        """
        if not await self.users.is_valid_api_key(db, data.api_key):
            audit.warning("Rejected log with invalid API key", key=mask_api_key(data.api_key))
            raise InvalidAPIKeyError()

        log = await LogStore(db).save(Log(**data.model_dump(), status=Status.ACTIVE))
        await db.commit()
        return LogResponse.model_validate(log)

    async def search_logs(
        self,
        db: AsyncSession,
        status: Status,
        offset: int,
        limit: int,
        environment: Environment | None = None,
        order_by: OrderByField | None = None,
        search_for: SearchTarget | None = None,
        search_value: str | None = None,
    ) -> Page[LogAggregateResponse]:
        """
        Search aggregates with filters, ordering and pagination.

        The total is counted with the same predicate but without the page
        window. The two queries are not run against a shared snapshot.
        """
        criteria = SearchCriteria(
            status=status,
            offset=offset,
            limit=limit,
            environment=environment,
            order_by=order_by,
            search_for=search_for,
            search_value=search_value,
        )
        store = LogStore(db)
        where = build_filters(criteria, store.aggregates.c)

        rows = await store.query_aggregates(where, criteria.order_by, criteria.offset, criteria.limit)
        total = await store.count_aggregates(where)

        return Page[LogAggregateResponse](
            items=[LogAggregateResponse.model_validate(row) for row in rows],
            total=total,
        )

    async def remove(self, db: AsyncSession, ids: Sequence[int]) -> int:
        """
        Delete every log of each aggregate the given ids belong to.

        Unknown ids are skipped. All deletes commit together.

        Returns:
            Number of log rows deleted
        """
        store = LogStore(db)
        deleted = 0

        async with unit_of_work(db):
            for log_id in ids:
                log = await store.get(log_id)
                if log is None:
                    continue
                deleted += await store.delete_matching(AggregateKey.from_log(log))

        audit.info("Removed log aggregates", requested=len(ids), deleted=deleted)
        return deleted

    async def archive_by_id(self, db: AsyncSession, ids: Sequence[int]) -> int:
        """
        Archive every log of each aggregate the given ids belong to.

        Unknown ids are skipped, as are rows an earlier id in the same batch
        already archived. All updates commit together.

        Returns:
            Number of log rows whose status changed
        """
        store = LogStore(db)
        archived = 0

        async with unit_of_work(db):
            for log_id in ids:
                log = await store.get(log_id)
                if log is None:
                    continue
                for member in await store.find_matching(AggregateKey.from_log(log)):
                    if member.status == Status.ARCHIVED:
                        continue
                    member.status = Status.ARCHIVED
                    await store.save(member)
                    archived += 1

        audit.info("Archived log aggregates", requested=len(ids), archived=archived)
        return archived

    async def details_by_id(self, db: AsyncSession, log_id: int) -> LogDetails:
        """
        Summarize a log with its owner's name and aggregate statistics.

        Raises:
            LogNotFoundError: If the id does not resolve to exactly one row
        """
        try:
            row = await LogStore(db).fetch_details(log_id)
        except NoResultFound as exc:
            raise LogNotFoundError(log_id) from exc
        return LogDetails.model_validate(row)


# Global service instance
log_service = LogService()
