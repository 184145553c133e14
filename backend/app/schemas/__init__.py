from app.schemas.log import (
    LogAggregateResponse,
    LogCreate,
    LogDetails,
    LogIdsRequest,
    LogResponse,
    Page,
)
from app.schemas.user import UserCreate, UserCreateResponse, UserResponse

__all__ = [
    "LogAggregateResponse",
    "LogCreate",
    "LogDetails",
    "LogIdsRequest",
    "LogResponse",
    "Page",
    "UserCreate",
    "UserCreateResponse",
    "UserResponse",
]
