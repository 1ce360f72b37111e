"""
User use cases — registration, lookup, search, self-or-admin update/delete.
"""

from __future__ import annotations

import logging
import uuid
from typing import List

from auth.jwt import CallerIdentity
from auth.policy import AuthorizationPolicy, policy
from core.errors import Result
from database.users import UserDirectory
from utils.schemas import UserCreate, UserRead, UserUpdate, user_to_read

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserDirectory, authz: AuthorizationPolicy = policy) -> None:
        self.users = users
        self.authz = authz

    async def _caller_is_admin(self, caller: CallerIdentity) -> bool:
        # Tokens outlive account deletion; a missing record is never an admin.
        record = await self.users.get_by_id(caller.user_id)
        return bool(record.ok and record.value.is_admin)

    async def _authorize(self, caller: CallerIdentity, user_id: uuid.UUID) -> Result[None]:
        is_admin = caller.user_id != user_id and await self._caller_is_admin(caller)
        return self.authz.self_or_admin(caller, user_id, is_admin)

    async def register(self, req: UserCreate) -> Result[UserRead]:
        created = await self.users.register(
            first_name=req.first_name,
            last_name=req.last_name,
            email=req.email,
            password=req.password,
            date_of_birth=req.date_of_birth,
        )
        if not created.ok:
            return created.propagate()
        return Result.success(user_to_read(created.value))

    async def get(self, user_id: uuid.UUID) -> Result[UserRead]:
        found = await self.users.get_by_id(user_id)
        if not found.ok:
            return found.propagate()
        return Result.success(user_to_read(found.value))

    async def list_all(self) -> List[UserRead]:
        return [user_to_read(u) for u in await self.users.list_all()]

    async def search(self, name: str) -> List[UserRead]:
        return [user_to_read(u) for u in await self.users.search_by_name(name)]

    async def update(
        self,
        caller: CallerIdentity,
        user_id: uuid.UUID,
        req: UserUpdate,
    ) -> Result[UserRead]:
        allowed = await self._authorize(caller, user_id)
        if not allowed.ok:
            return allowed.propagate()

        updated = await self.users.update(
            user_id,
            first_name=req.first_name,
            last_name=req.last_name,
            email=req.email,
            date_of_birth=req.date_of_birth,
        )
        if not updated.ok:
            return updated.propagate()
        return Result.success(user_to_read(updated.value))

    async def delete(self, caller: CallerIdentity, user_id: uuid.UUID) -> Result[None]:
        allowed = await self._authorize(caller, user_id)
        if not allowed.ok:
            return allowed
        return await self.users.delete(user_id)
