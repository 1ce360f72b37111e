"""
Task use cases — every mutation is scoped to the calling owner.
"""

from __future__ import annotations

import logging
import uuid
from typing import List

from auth.jwt import CallerIdentity
from auth.policy import AuthorizationPolicy, policy
from core.errors import Result
from database.tasks import TaskStore
from utils.schemas import TaskCreate, TaskRead, TaskUpdate, task_to_read

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, tasks: TaskStore, authz: AuthorizationPolicy = policy) -> None:
        self.tasks = tasks
        self.authz = authz

    async def create(self, caller: CallerIdentity, req: TaskCreate) -> Result[TaskRead]:
        """Create a task owned by the caller."""
        created = await self.tasks.create(
            owner_id=caller.user_id,
            title=req.title,
            description=req.description,
            due_date=req.due_date,
            status=req.status,
        )
        if not created.ok:
            return created.propagate()
        return Result.success(task_to_read(created.value))

    async def get(self, caller: CallerIdentity, task_id: uuid.UUID) -> Result[TaskRead]:
        found = await self.tasks.get_owned(task_id, caller.user_id)
        if not found.ok:
            return found.propagate()
        owned = self.authz.owner_only(caller, found.value)
        if not owned.ok:
            return owned.propagate()
        return Result.success(task_to_read(owned.value))

    async def update(
        self,
        caller: CallerIdentity,
        task_id: uuid.UUID,
        req: TaskUpdate,
    ) -> Result[TaskRead]:
        updated = await self.tasks.update(
            task_id,
            caller.user_id,
            title=req.title,
            description=req.description,
            due_date=req.due_date,
            status=req.status,
        )
        if not updated.ok:
            return updated.propagate()
        return Result.success(task_to_read(updated.value))

    async def delete(self, caller: CallerIdentity, task_id: uuid.UUID) -> Result[None]:
        return await self.tasks.delete(task_id, caller.user_id)

    async def list_all(self) -> List[TaskRead]:
        return [task_to_read(t) for t in await self.tasks.list_all()]

    async def list_for_user(
        self,
        caller: CallerIdentity,
        user_id: uuid.UUID,
    ) -> Result[List[TaskRead]]:
        allowed = self.authz.same_user(caller, user_id)
        if not allowed.ok:
            return allowed.propagate()

        owner = await self.tasks.users.get_by_id(user_id)
        if not owner.ok:
            return owner.propagate()
        return Result.success([task_to_read(t) for t in await self.tasks.list_for_owner(user_id)])
