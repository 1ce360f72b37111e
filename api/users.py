"""
User API routes.

Route prefix: /api/v1/users
"""

from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status

from api.errors import unwrap
from auth.dependencies import get_current_caller, get_user_service
from auth.jwt import CallerIdentity
from core.user_service import UserService
from utils.schemas import UserCreate, UserRead, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    req: UserCreate,
    users: UserService = Depends(get_user_service),
) -> UserRead:
    """Register a new user."""
    return unwrap(await users.register(req))


@router.get("", response_model=List[UserRead])
async def list_users(users: UserService = Depends(get_user_service)) -> List[UserRead]:
    return await users.list_all()


@router.get("/search/{name}", response_model=List[UserRead])
async def search_users(
    name: str,
    users: UserService = Depends(get_user_service),
) -> List[UserRead]:
    """Case-insensitive search over first and last names."""
    return await users.search(name)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: uuid.UUID,
    users: UserService = Depends(get_user_service),
) -> UserRead:
    return unwrap(await users.get(user_id))


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: uuid.UUID,
    req: UserUpdate,
    caller: CallerIdentity = Depends(get_current_caller),
    users: UserService = Depends(get_user_service),
) -> UserRead:
    """Update a user's profile (the user themselves or an admin)."""
    return unwrap(await users.update(caller, user_id, req))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    caller: CallerIdentity = Depends(get_current_caller),
    users: UserService = Depends(get_user_service),
) -> Response:
    unwrap(await users.delete(caller, user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
