"""
Task store — owns ``Task`` rows.

Every read or write of a single task goes through an owner-scoped lookup
(``task_id`` AND ``owner_id`` in the same query), so a task that belongs to
someone else is reported exactly like one that does not exist.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ErrorKind, Result, not_found
from database.models import Task, TaskStatus, utcnow
from database.users import UserDirectory

logger = logging.getLogger(__name__)


class TaskStore:
    def __init__(self, session: AsyncSession, users: UserDirectory) -> None:
        self.session = session
        self.users = users

    async def _owned(self, task_id: uuid.UUID, owner_id: uuid.UUID) -> Optional[Task]:
        result = await self.session.execute(
            select(Task).where(Task.task_id == task_id, Task.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        owner_id: uuid.UUID,
        title: str,
        description: Optional[str],
        due_date: date,
        status: Optional[TaskStatus] = None,
    ) -> Result[Task]:
        if not title or not title.strip():
            return Result.failure(ErrorKind.VALIDATION, "Title is required")

        owner = await self.users.get_by_id(owner_id)
        if not owner.ok:
            return owner.propagate()

        now = utcnow()
        task = Task(
            task_id=uuid.uuid4(),
            title=title,
            description=description,
            due_date=due_date,
            status=status or TaskStatus.TODO,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(task)
        await self.session.flush()
        logger.info("Created task %s for user %s", task.task_id, owner_id)
        return Result.success(task)

    async def get_owned(self, task_id: uuid.UUID, owner_id: uuid.UUID) -> Result[Task]:
        task = await self._owned(task_id, owner_id)
        if task is None:
            return not_found("Task", task_id)
        return Result.success(task)

    async def update(
        self,
        task_id: uuid.UUID,
        owner_id: uuid.UUID,
        title: str,
        description: Optional[str],
        due_date: date,
        status: TaskStatus,
    ) -> Result[Task]:
        """Full overwrite of the four mutable fields."""
        task = await self._owned(task_id, owner_id)
        if task is None:
            return not_found("Task", task_id)
        if not title or not title.strip():
            return Result.failure(ErrorKind.VALIDATION, "Title is required")

        task.title = title
        task.description = description
        task.due_date = due_date
        task.status = status
        task.updated_at = utcnow()
        await self.session.flush()
        return Result.success(task)

    async def delete(self, task_id: uuid.UUID, owner_id: uuid.UUID) -> Result[None]:
        task = await self._owned(task_id, owner_id)
        if task is None:
            return not_found("Task", task_id)

        await self.session.delete(task)
        await self.session.flush()
        logger.info("Deleted task %s", task_id)
        return Result.success()

    async def list_all(self) -> List[Task]:
        result = await self.session.execute(select(Task).order_by(Task.created_at))
        return list(result.scalars().all())

    async def list_for_owner(self, owner_id: uuid.UUID) -> List[Task]:
        result = await self.session.execute(
            select(Task).where(Task.owner_id == owner_id).order_by(Task.created_at)
        )
        return list(result.scalars().all())
