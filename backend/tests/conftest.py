"""Pytest fixtures for backend tests."""

import os
from collections.abc import AsyncGenerator

# Point the application engine at SQLite before any app module is imported
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.log import Environment, Level, Log, Status
from app.models.user import User

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_API_KEY = "softlog_test-key-0123456789abcdef"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_user(test_session: AsyncSession) -> User:
    """Create a user owning TEST_API_KEY."""
    user = User(
        name="Test User",
        email="test@example.com",
        api_key=TEST_API_KEY,
        is_active=True,
    )
    test_session.add(user)
    await test_session.commit()
    await test_session.refresh(user)
    return user


@pytest.fixture
def make_log(test_session: AsyncSession, test_user: User):
    """Factory inserting a committed log; keyword arguments override the defaults."""

    async def _make(**overrides) -> Log:
        values = {
            "title": "Database timeout",
            "description": "Connection to the orders db timed out",
            "level": Level.ERROR,
            "source": "10.0.0.1",
            "environment": Environment.PRODUCTION,
            "status": Status.ACTIVE,
            "api_key": test_user.api_key,
        }
        values.update(overrides)
        log = Log(**values)
        test_session.add(log)
        await test_session.commit()
        await test_session.refresh(log)
        return log

    return _make


@pytest_asyncio.fixture(scope="function")
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client bound to the test session."""
    async def override():
        yield test_session

    app.dependency_overrides[get_db] = override

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
