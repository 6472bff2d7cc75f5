# Copyright (C) 2024 Taskboard Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Task API routes. Every route is scoped to the token's user."""

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_server.auth import get_current_user_id
from taskboard_server.database import get_db
from taskboard_server.api.schemas import TaskCreate, TaskResponse
from taskboard_server.services import tasks

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    user_id: Any = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> TaskResponse:
    """Create a task for the current user."""
    task = await tasks.create_task(db, user_id, data.title, data.description, data.deadline)
    return TaskResponse.model_validate(task)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    user_id: Any = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> list[TaskResponse]:
    """List current user's tasks."""
    return [TaskResponse.model_validate(t) for t in await tasks.list_tasks(db, user_id)]
