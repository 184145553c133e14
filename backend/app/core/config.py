import logging
import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings


def _get_version() -> str:
    """Read version from pyproject.toml or environment variable."""
    # First check environment variable (for Docker/CI overrides)
    if env_version := os.getenv("SOFTLOG_VERSION"):
        return env_version

    try:
        pyproject_path = Path(__file__).resolve().parents[3] / "pyproject.toml"
        if pyproject_path.exists():
            for line in pyproject_path.read_text().split("\n"):
                if line.startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
    except OSError:
        pass

    return "0.0.0-dev"


APP_VERSION = _get_version()


class Settings(BaseSettings):
    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "softlog"
    POSTGRES_PASSWORD: str = "devpassword"
    POSTGRES_DB: str = "softlog"

    # Full URL override (e.g. sqlite+aiosqlite:// for local runs and tests)
    DATABASE_URL_OVERRIDE: str | None = None
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 40
    CREATE_TABLES_ON_STARTUP: bool = True

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # App
    APP_NAME: str = "Softlog"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Upper bound for the page size accepted by the search endpoint
    SEARCH_MAX_PAGE_SIZE: int = 500

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the stdlib logging module knows."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL (got {v!r})")
        return level

    @field_validator("SEARCH_MAX_PAGE_SIZE")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("SEARCH_MAX_PAGE_SIZE must be positive")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
