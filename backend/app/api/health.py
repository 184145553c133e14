"""Health check endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import APP_VERSION
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(db: Annotated[AsyncSession, Depends(get_db)]):
    """Returns 200 when the database answers, 503 otherwise."""
    checks = {"status": "ok", "database": True, "version": APP_VERSION}

    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        checks["status"] = "unhealthy"
        checks["database"] = False

    return JSONResponse(status_code=200 if checks["database"] else 503, content=checks)
