"""
Log endpoints: ingestion, aggregate search, details and bulk lifecycle actions.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import validation_error
from app.db.session import get_db
from app.models.log import Environment, Status
from app.schemas.log import (
    LogAggregateResponse,
    LogCreate,
    LogDetails,
    LogIdsRequest,
    LogResponse,
    Page,
)
from app.services.log_filters import OrderByField, SearchTarget
from app.services.logs import log_service

router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("", response_model=LogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(
    data: LogCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Submit a log event.
    The api_key in the body must belong to an active user.
    """
    return await log_service.save(db, data)


@router.get("", response_model=Page[LogAggregateResponse])
async def search_logs(
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: Status = Query(..., alias="status"),
    offset: int = Query(..., ge=0),
    limit: int = Query(..., ge=1),
    environment: Environment | None = Query(None),
    order_by: OrderByField | None = Query(None, description="Sorts descending"),
    search_for: SearchTarget | None = Query(None, description="DESCRIPTION, LEVEL or SOURCE"),
    search_value: str | None = Query(None),
):
    """
    Search aggregated logs.
    search_for and search_value only filter when both are given.
    """
    if limit > settings.SEARCH_MAX_PAGE_SIZE:
        raise validation_error(
            f"limit must not exceed {settings.SEARCH_MAX_PAGE_SIZE}",
            details={"limit": limit},
        )

    return await log_service.search_logs(
        db,
        status=status_filter,
        offset=offset,
        limit=limit,
        environment=environment,
        order_by=order_by,
        search_for=search_for,
        search_value=search_value,
    )


@router.get("/{log_id}", response_model=LogDetails)
async def get_log_details(
    log_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get a log with its owner and aggregate statistics."""
    return await log_service.details_by_id(db, log_id)


@router.post("/archive", status_code=status.HTTP_204_NO_CONTENT)
async def archive_logs(
    data: LogIdsRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Archive every log in the aggregates of the given ids."""
    await log_service.archive_by_id(db, data.ids)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/remove", status_code=status.HTTP_204_NO_CONTENT)
async def remove_logs(
    data: LogIdsRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete every log in the aggregates of the given ids."""
    await log_service.remove(db, data.ids)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
