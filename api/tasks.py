"""
Task API routes.

Route prefix: /api/v1/tasks
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from api.errors import unwrap
from auth.dependencies import get_current_caller, get_task_listing_caller, get_task_service
from auth.jwt import CallerIdentity
from core.task_service import TaskService
from utils.schemas import TaskCreate, TaskRead, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    req: TaskCreate,
    caller: CallerIdentity = Depends(get_current_caller),
    tasks: TaskService = Depends(get_task_service),
) -> TaskRead:
    """Create a task owned by the authenticated caller."""
    return unwrap(await tasks.create(caller, req))


@router.get("", response_model=List[TaskRead])
async def list_tasks(
    caller: Optional[CallerIdentity] = Depends(get_task_listing_caller),
    tasks: TaskService = Depends(get_task_service),
) -> List[TaskRead]:
    """Every task in the system, regardless of owner."""
    return await tasks.list_all()


@router.get("/user/{user_id}", response_model=List[TaskRead])
async def list_user_tasks(
    user_id: uuid.UUID,
    caller: CallerIdentity = Depends(get_current_caller),
    tasks: TaskService = Depends(get_task_service),
) -> List[TaskRead]:
    return unwrap(await tasks.list_for_user(caller, user_id))


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: uuid.UUID,
    caller: CallerIdentity = Depends(get_current_caller),
    tasks: TaskService = Depends(get_task_service),
) -> TaskRead:
    return unwrap(await tasks.get(caller, task_id))


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: uuid.UUID,
    req: TaskUpdate,
    caller: CallerIdentity = Depends(get_current_caller),
    tasks: TaskService = Depends(get_task_service),
) -> TaskRead:
    return unwrap(await tasks.update(caller, task_id, req))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: uuid.UUID,
    caller: CallerIdentity = Depends(get_current_caller),
    tasks: TaskService = Depends(get_task_service),
) -> Response:
    unwrap(await tasks.delete(caller, task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
