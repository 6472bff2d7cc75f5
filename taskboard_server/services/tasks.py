# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Per-user task storage."""

from datetime import date, datetime, time, timezone
from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_server.errors import BadRequest
from taskboard_server.models import Task


def parse_user_id(value: Any) -> int:
    """Owner id from token claims. Raises BadRequest unless it is an integer."""
    if isinstance(value, bool) or value is None:
        raise BadRequest("Invalid user ID")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise BadRequest("Invalid user ID") from None


def parse_deadline(value: Any) -> datetime | None:
    """ISO-8601 date or datetime, as an aware UTC datetime. Raises BadRequest if unparseable."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise BadRequest("Invalid date")
    raw = value.strip()
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(raw), time())
        except ValueError:
            raise BadRequest("Invalid date") from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


async def create_task(
    db: AsyncSession,
    user_id: Any,
    title: str | None,
    description: str | None,
    deadline: str | None = None,
) -> Task:
    owner = parse_user_id(user_id)
    if not title or not description:
        raise BadRequest("Title and description are required")
    task = Task(
        title=title,
        description=description,
        deadline=parse_deadline(deadline),
        user_id=owner,
    )
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task


async def list_tasks(db: AsyncSession, user_id: Any) -> Sequence[Task]:
    """All tasks owned by the user, in storage order."""
    owner = parse_user_id(user_id)
    result = await db.execute(select(Task).where(Task.user_id == owner))
    return result.scalars().all()
