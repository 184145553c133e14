import secrets

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, IDMixin, TimestampMixin

API_KEY_PREFIX = "softlog_"


def generate_api_key() -> str:
    """Generate a secure API key with a softlog_ prefix."""
    return f"{API_KEY_PREFIX}{secrets.token_urlsafe(32)}"


class User(Base, IDMixin, TimestampMixin):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    # Clients send this key with every log they submit
    api_key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(default=True)
