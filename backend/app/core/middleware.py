"""Custom middleware for request validation and error handling."""

import logging
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.errors import ErrorCode

logger = logging.getLogger(__name__)


class RequestValidationMiddleware(BaseHTTPMiddleware):
    """Middleware for request validation and tracing.

    Enforces:
    - Request size limits
    - Content-Type validation for POST/PUT/PATCH
    - Request ID generation
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 1 * 1024 * 1024,  # 1 MB default
        enforce_content_type: bool = True,
    ) -> None:
        super().__init__(app)
        self.max_request_size = max_request_size
        self.enforce_content_type = enforce_content_type

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > self.max_request_size:
                logger.warning(f"Request too large: {content_length} bytes")
                return self._reject(
                    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    f"Request too large. Maximum size is {self.max_request_size} bytes",
                    "REQUEST_TOO_LARGE",
                    request_id,
                )

            if self.enforce_content_type and request.method in {"POST", "PUT", "PATCH"}:
                content_type = request.headers.get("content-type", "")
                if not content_type.startswith("application/json"):
                    logger.warning(f"Invalid Content-Type: {content_type!r}")
                    return self._reject(
                        status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                        "Content-Type must be application/json",
                        "INVALID_CONTENT_TYPE",
                        request_id,
                    )

            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    @staticmethod
    def _reject(status_code: int, detail: str, error_code: str, request_id: str) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": detail,
                "error_code": error_code,
                "request_id": request_id,
            },
        )


class ErrorResponseMiddleware(BaseHTTPMiddleware):
    """Middleware to standardize error responses.

    Catches exceptions that escaped the route handlers and returns a
    consistent error body.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception(f"Request error: {request.method} {request.url.path}")

            if isinstance(e, IntegrityError):
                status_code = status.HTTP_409_CONFLICT
                error_code = ErrorCode.CONFLICT
                detail = "Data integrity error (duplicate or constraint violation)"
            elif isinstance(e, OperationalError):
                status_code = status.HTTP_503_SERVICE_UNAVAILABLE
                error_code = ErrorCode.SERVICE_UNAVAILABLE
                detail = "Database operation failed"
            else:
                status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
                error_code = ErrorCode.INTERNAL_ERROR
                detail = "An unexpected error occurred"

            return JSONResponse(
                content={
                    "detail": detail,
                    "error_code": error_code,
                    "request_id": request_id,
                },
                status_code=status_code,
            )
