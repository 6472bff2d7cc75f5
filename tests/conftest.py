# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pytest fixtures. Tests run against a throwaway SQLite database (aiosqlite)."""

import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="taskboard-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmpdir}/test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["VERIFICATION_PURGE_INTERVAL_MINUTES"] = "0"
os.environ.pop("SMTP_HOST", None)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from taskboard_server.database import async_session_maker, drop_db, engine, init_db  # noqa: E402
from taskboard_server.main import app  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def database(anyio_backend):
    """Fresh tables for each test."""
    await drop_db()
    await init_db()
    yield
    await engine.dispose()


@pytest.fixture
async def db(database):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
async def client(database):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def outbox(monkeypatch):
    """Capture verification emails instead of sending them: list of (email, code)."""
    sent: list[tuple[str, int]] = []

    async def fake_send(to: str, code: int) -> None:
        sent.append((to, code))

    monkeypatch.setattr("taskboard_server.services.verification.send_verification_email", fake_send)
    return sent
