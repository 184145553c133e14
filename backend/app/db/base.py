"""Declarative base and shared column mixins."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntID = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


class IDMixin:
    id: Mapped[int] = mapped_column(BigIntID, primary_key=True, autoincrement=True)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
