"""
Schemas for the log API.
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from app.models.log import Environment, Level, Status

T = TypeVar("T")


class LogCreate(BaseModel):
    """A log event submitted by a client."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    level: Level
    source: str = Field(..., min_length=1, max_length=255)
    environment: Environment
    api_key: str = Field(..., max_length=255)


class LogResponse(BaseModel):
    """A stored log event."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    level: Level
    source: str
    environment: Environment
    status: Status
    created_at: datetime


class LogAggregateResponse(BaseModel):
    """One aggregate row in a search result."""

    id: int
    title: str
    description: str
    level: Level
    source: str
    environment: Environment
    status: Status
    events: int
    created_at: datetime


class LogDetails(BaseModel):
    """A log joined with its owner and aggregate statistics."""

    id: int
    level: Level
    api_key: str
    source: str
    title: str
    description: str
    user: str
    events: int
    created: datetime


class Page(BaseModel, Generic[T]):
    """A page of results plus the total matching the same filters."""

    items: list[T]
    total: int


class LogIdsRequest(BaseModel):
    """Ids of logs whose aggregates a bulk operation applies to."""

    ids: list[int] = Field(..., min_length=1)
