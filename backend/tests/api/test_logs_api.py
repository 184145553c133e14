"""Tests for the log API endpoints."""

from datetime import datetime

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.log import Level, Log, Status
from app.models.user import User


def log_payload(api_key: str, **overrides) -> dict:
    payload = {
        "title": "Database timeout",
        "description": "Connection to the orders db timed out",
        "level": "ERROR",
        "source": "10.0.0.1",
        "environment": "PRODUCTION",
        "api_key": api_key,
    }
    payload.update(overrides)
    return payload


class TestCreateLog:
    @pytest.mark.asyncio
    async def test_create_log(self, client: AsyncClient, test_user: User):
        response = await client.post("/api/logs", json=log_payload(test_user.api_key))

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Database timeout"
        assert data["status"] == "ACTIVE"
        assert "api_key" not in data
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_invalid_api_key_rejected(self, client: AsyncClient, test_session: AsyncSession, test_user: User):
        response = await client.post(
            "/api/logs",
            json=log_payload("softlog_wrong-key"),
            headers={"X-Request-ID": "req-123"},
        )

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "INVALID_API_KEY"
        assert error["request_id"] == "req-123"

        count = await test_session.execute(select(func.count()).select_from(Log))
        assert count.scalar_one() == 0

    @pytest.mark.asyncio
    async def test_unknown_level_rejected_by_validation(self, client: AsyncClient, test_user: User):
        response = await client.post("/api/logs", json=log_payload(test_user.api_key, level="LOUD"))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_non_json_body_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/logs",
            content="title=x",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 415


class TestSearchLogs:
    @pytest.mark.asyncio
    async def test_search_returns_page_and_total(self, client: AsyncClient, make_log):
        for i in range(5):
            await make_log(title=f"Event {i}")

        response = await client.get(
            "/api/logs", params={"status": "ACTIVE", "offset": 0, "limit": 2}
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 2
        assert data["total"] == 5
        assert data["items"][0]["events"] == 1

    @pytest.mark.asyncio
    async def test_search_with_filters(self, client: AsyncClient, make_log):
        await make_log(title="Payment refused", source="payments-api")
        await make_log(title="Login slow", source="auth-api", level=Level.WARNING)

        response = await client.get(
            "/api/logs",
            params={
                "status": "ACTIVE",
                "offset": 0,
                "limit": 10,
                "search_for": "SOURCE",
                "search_value": "PAYMENTS",
                "order_by": "EVENTS",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["title"] == "Payment refused"

    @pytest.mark.asyncio
    async def test_status_and_paging_are_required(self, client: AsyncClient):
        response = await client.get("/api/logs", params={"offset": 0, "limit": 10})
        assert response.status_code == 422

        response = await client.get("/api/logs", params={"status": "ACTIVE"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_limit_above_maximum_rejected(self, client: AsyncClient):
        response = await client.get(
            "/api/logs", params={"status": "ACTIVE", "offset": 0, "limit": 100_000}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestLogDetails:
    @pytest.mark.asyncio
    async def test_details(self, client: AsyncClient, make_log, test_user: User):
        log = await make_log(created_at=datetime(2024, 5, 1, 10, 0))
        await make_log(created_at=datetime(2024, 5, 3, 10, 0))

        response = await client.get(f"/api/logs/{log.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == log.id
        assert data["events"] == 2
        assert data["user"] == test_user.name
        assert data["created"].startswith("2024-05-03T10:00")

    @pytest.mark.asyncio
    async def test_details_not_found(self, client: AsyncClient):
        response = await client.get("/api/logs/987654")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["details"] == {"id": 987654}


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_archive(self, client: AsyncClient, test_session: AsyncSession, make_log):
        target = await make_log()
        await make_log()
        other = await make_log(title="Other")

        response = await client.post("/api/logs/archive", json={"ids": [target.id, 123456]})

        assert response.status_code == 204
        result = await test_session.execute(
            select(Log.id, Log.status).order_by(Log.id)
        )
        statuses = dict(result.all())
        assert statuses[other.id] == Status.ACTIVE
        assert [s for i, s in statuses.items() if i != other.id] == [Status.ARCHIVED, Status.ARCHIVED]

    @pytest.mark.asyncio
    async def test_remove(self, client: AsyncClient, test_session: AsyncSession, make_log):
        target = await make_log()
        await make_log()
        other = await make_log(title="Other")

        response = await client.post("/api/logs/remove", json={"ids": [target.id]})

        assert response.status_code == 204
        result = await test_session.execute(select(Log.id))
        assert result.scalars().all() == [other.id]

    @pytest.mark.asyncio
    async def test_empty_id_list_rejected(self, client: AsyncClient):
        response = await client.post("/api/logs/remove", json={"ids": []})

        assert response.status_code == 422
