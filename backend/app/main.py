import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.health import router as health_router
from app.api.logs import router as logs_router
from app.api.users import router as users_router
from app.core.config import APP_VERSION, settings
from app.core.errors import (
    HTTPError,
    http_error_handler,
    invalid_api_key_handler,
    log_not_found_handler,
)
from app.core.exceptions import InvalidAPIKeyError, LogNotFoundError
from app.core.logging import setup_logging
from app.core.middleware import ErrorResponseMiddleware, RequestValidationMiddleware
from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    setup_logging()

    if settings.CREATE_TABLES_ON_STARTUP:
        logger.info("Creating database tables")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    yield

    logger.info("Disposing database engine")
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    redirect_slashes=False,
)

# Register custom exception handlers for standardized error responses
app.add_exception_handler(HTTPError, http_error_handler)
app.add_exception_handler(InvalidAPIKeyError, invalid_api_key_handler)
app.add_exception_handler(LogNotFoundError, log_not_found_handler)

# Request validation middleware
app.add_middleware(
    RequestValidationMiddleware,
    max_request_size=1 * 1024 * 1024,
    enforce_content_type=True,
)

# Error response middleware (add last to catch all errors)
app.add_middleware(ErrorResponseMiddleware)

app.include_router(health_router, prefix="/api")
app.include_router(logs_router, prefix="/api")
app.include_router(users_router, prefix="/api")
