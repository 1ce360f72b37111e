"""
Authorization rules applied before any store is touched.

All checks are pure functions of the caller identity and the target; they
hold no state and never hit the database.
"""

from __future__ import annotations

import logging
import uuid

from auth.jwt import CallerIdentity
from core.errors import ErrorKind, Result, not_found
from database.models import Task

logger = logging.getLogger(__name__)


class AuthorizationPolicy:
    @staticmethod
    def self_or_admin(
        caller: CallerIdentity,
        target_user_id: uuid.UUID,
        caller_is_admin: bool = False,
    ) -> Result[None]:
        """A user record may be changed by its owner or by an admin."""
        if caller.user_id == target_user_id or caller_is_admin:
            return Result.success()
        logger.info("Denied user %s access to user %s", caller.user_id, target_user_id)
        return Result.failure(
            ErrorKind.FORBIDDEN, "You are not allowed to modify this user"
        )

    @staticmethod
    def same_user(caller: CallerIdentity, user_id: uuid.UUID) -> Result[None]:
        if caller.user_id == user_id:
            return Result.success()
        logger.info("Denied user %s access to tasks of %s", caller.user_id, user_id)
        return Result.failure(
            ErrorKind.FORBIDDEN, "You can only view your own tasks"
        )

    @staticmethod
    def owner_only(caller: CallerIdentity, task: Task) -> Result[Task]:
        # A non-owner must not learn that the task exists.
        if task.owner_id == caller.user_id:
            return Result.success(task)
        return not_found("Task", task.task_id)


policy = AuthorizationPolicy()
