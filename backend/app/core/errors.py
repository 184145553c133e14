"""
Standardized error response system.

Provides consistent error responses across all API endpoints.
"""
import uuid
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.core.exceptions import InvalidAPIKeyError, LogNotFoundError


class ErrorCode:
    """Standard error codes."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Authentication/Authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_API_KEY = "INVALID_API_KEY"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ErrorResponse:
    """Standard error response format."""

    @staticmethod
    def create(
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> JSONResponse:
        """
        Create a standardized error response.

        Args:
            code: Machine-readable error code
            message: Human-readable error message
            status_code: HTTP status code
            details: Additional error details (optional)
            request_id: Request correlation ID (optional)

        Returns:
            JSONResponse with standard error format
        """
        error_data: Dict[str, Any] = {
            "error": {
                "code": code,
                "message": message,
            }
        }

        if details:
            error_data["error"]["details"] = details

        if request_id:
            error_data["error"]["request_id"] = request_id

        return JSONResponse(status_code=status_code, content=error_data)


class HTTPError(HTTPException):
    """
    Enhanced HTTPException with standard error response format.

    Usage:
        raise HTTPError(
            status_code=404,
            code=ErrorCode.NOT_FOUND,
            message="Log not found",
            details={"log_id": 123}
        )
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(status_code=status_code, detail=message)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", str(uuid.uuid4()))


async def http_error_handler(request: Request, exc: HTTPError) -> JSONResponse:
    """
    Handle HTTPError exceptions and return standardized error response.

    This should be added to FastAPI exception handlers.
    """
    return ErrorResponse.create(
        code=exc.code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        request_id=_request_id(request),
    )


async def invalid_api_key_handler(request: Request, exc: InvalidAPIKeyError) -> JSONResponse:
    """Translate a rejected ingestion into a 401 envelope."""
    error = unauthorized(exc.message, code=ErrorCode.INVALID_API_KEY)
    return await http_error_handler(request, error)


async def log_not_found_handler(request: Request, exc: LogNotFoundError) -> JSONResponse:
    """Translate a missing detail row into a 404 envelope."""
    error = not_found("Log", details={"id": exc.log_id})
    return await http_error_handler(request, error)


# Convenience functions for common errors

def not_found(resource: str, details: Optional[Dict[str, Any]] = None) -> HTTPError:
    """Create a 404 NOT_FOUND error."""
    return HTTPError(
        status_code=status.HTTP_404_NOT_FOUND,
        code=ErrorCode.NOT_FOUND,
        message=f"{resource} not found",
        details=details,
    )


def unauthorized(
    message: str = "Unauthorized",
    details: Optional[Dict[str, Any]] = None,
    code: str = ErrorCode.UNAUTHORIZED,
) -> HTTPError:
    """Create a 401 UNAUTHORIZED error."""
    return HTTPError(
        status_code=status.HTTP_401_UNAUTHORIZED,
        code=code,
        message=message,
        details=details,
    )


def validation_error(message: str, details: Optional[Dict[str, Any]] = None) -> HTTPError:
    """Create a 400 VALIDATION_ERROR error."""
    return HTTPError(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        details=details,
    )


def conflict(message: str, details: Optional[Dict[str, Any]] = None) -> HTTPError:
    """Create a 409 CONFLICT error."""
    return HTTPError(
        status_code=status.HTTP_409_CONFLICT,
        code=ErrorCode.CONFLICT,
        message=message,
        details=details,
    )
