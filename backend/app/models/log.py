"""
Raw log event model and the identity key that groups events into aggregates.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, IDMixin, TimestampMixin


class Level(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"

    @classmethod
    def from_value(cls, value: str | None) -> "Level | None":
        """Parse a level name case-insensitively, returning None when nothing matches."""
        if value is None:
            return None
        candidate = value.strip().upper()
        for member in cls:
            if member.value == candidate:
                return member
        return None


class Status(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class Environment(str, Enum):
    PRODUCTION = "PRODUCTION"
    HOMOLOGATION = "HOMOLOGATION"
    DEVELOPMENT = "DEVELOPMENT"


def _enum_column(enum_cls: type[Enum], name: str) -> SAEnum:
    return SAEnum(enum_cls, name=name, native_enum=False, length=16, validate_strings=True)


class Log(Base, IDMixin, TimestampMixin):
    """A single logged event as submitted by a client."""

    __tablename__ = "logs"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    level: Mapped[Level] = mapped_column(_enum_column(Level, "loglevel"), nullable=False)
    source: Mapped[str] = mapped_column(String(255), nullable=False)
    api_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    status: Mapped[Status] = mapped_column(
        _enum_column(Status, "logstatus"), nullable=False, default=Status.ACTIVE, index=True
    )
    environment: Mapped[Environment] = mapped_column(
        _enum_column(Environment, "logenvironment"), nullable=False, index=True
    )

    __table_args__ = (
        Index("idx_logs_aggregate_key", "title", "level", "api_key", "source", "status", "environment"),
    )

    def __repr__(self) -> str:
        return f"<Log id={self.id} level={self.level} status={self.status} title={self.title!r}>"


@dataclass(frozen=True)
class AggregateKey:
    """
    The identity fields shared by every event of one aggregate.

    Two events belong to the same aggregate exactly when all seven fields
    are equal, status included.
    """

    title: str
    description: str
    level: Level
    api_key: str
    source: str
    status: Status
    environment: Environment

    @classmethod
    def from_log(cls, log: Log) -> "AggregateKey":
        return cls(**{name: getattr(log, name) for name in cls.field_names()})

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def clauses(self, source: Any) -> list:
        """Equality clauses against ``source`` (a mapped class or a selectable's ``.c``)."""
        return [getattr(source, name) == getattr(self, name) for name in self.field_names()]
