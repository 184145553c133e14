"""Tests for application settings."""

import pytest
from pydantic_core import ValidationError

from app.core.config import Settings


class TestDatabaseUrl:
    def test_defaults_to_postgres(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL_OVERRIDE", raising=False)
        settings = Settings(POSTGRES_HOST="db", POSTGRES_DB="logs")

        assert settings.DATABASE_URL == "postgresql+asyncpg://softlog:devpassword@db:5432/logs"

    def test_override_wins(self):
        settings = Settings(DATABASE_URL_OVERRIDE="sqlite+aiosqlite:///softlog.db")

        assert settings.DATABASE_URL == "sqlite+aiosqlite:///softlog.db"

    def test_override_from_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

        assert Settings().DATABASE_URL == "sqlite+aiosqlite://"


class TestLogLevel:
    def test_normalizes_case(self):
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_rejects_unknown_level(self):
        with pytest.raises(ValidationError, match="LOG_LEVEL must be one of"):
            Settings(LOG_LEVEL="chatty")


def test_page_size_must_be_positive():
    with pytest.raises(ValidationError, match="SEARCH_MAX_PAGE_SIZE must be positive"):
        Settings(SEARCH_MAX_PAGE_SIZE=0)


def test_version_from_environment(monkeypatch):
    monkeypatch.setenv("SOFTLOG_VERSION", "9.9.9")
    import importlib
    from app.core import config
    importlib.reload(config)

    assert config.APP_VERSION == "9.9.9"

    monkeypatch.delenv("SOFTLOG_VERSION")
    importlib.reload(config)
    assert config.APP_VERSION == "0.1.0"
