# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""App-level endpoints and request validation."""

from datetime import datetime, timedelta, timezone

import anyio
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from taskboard_server.auth import create_access_token
from taskboard_server.database import async_session_maker
from taskboard_server.main import app, lifespan, purge_once
from taskboard_server.models import VerificationCode

pytestmark = pytest.mark.anyio


async def test_health(client: AsyncClient):
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


async def test_root_info(client: AsyncClient):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["api"] == "/api"


async def test_malformed_body_is_400(client: AsyncClient):
    r = await client.post(
        "/api/users/login",
        content="not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "BadRequest"


async def test_cors_preflight_allows_configured_origin(client: AsyncClient):
    r = await client.options(
        "/api/tasks",
        headers={
            "Origin": "http://localhost:3001",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:3001"
    assert r.headers["access-control-allow-credentials"] == "true"


async def test_database_error_is_generic_500_with_cors(client: AsyncClient, monkeypatch):
    async def broken_list(db, user_id):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr("taskboard_server.services.tasks.list_tasks", broken_list)
    token = create_access_token({"userId": 1})
    r = await client.get(
        "/api/tasks",
        headers={"Authorization": f"Bearer {token}", "Origin": "http://localhost:3001"},
    )
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error", "error": "InternalError"}
    assert "connection lost" not in r.text
    assert r.headers["access-control-allow-origin"] == "http://localhost:3001"


async def test_purge_once_removes_expired_codes(database):
    async with async_session_maker() as session:
        session.add(
            VerificationCode(
                email="stale@example.com",
                code=123456,
                expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
            )
        )
        await session.commit()
    assert await purge_once() == 1
    assert await purge_once() == 0


async def test_lifespan_runs_purge_loop_and_stops_cleanly(database, monkeypatch):
    async with async_session_maker() as session:
        session.add(
            VerificationCode(
                email="stale@example.com",
                code=123456,
                expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
            )
        )
        await session.commit()

    monkeypatch.setattr("taskboard_server.main.settings.verification_purge_interval_minutes", 0.001)
    async with lifespan(app):
        for _ in range(50):
            await anyio.sleep(0.05)
            async with async_session_maker() as session:
                left = await session.scalar(select(func.count()).select_from(VerificationCode))
            if left == 0:
                break
    assert left == 0
