"""
FastAPI dependencies for authentication and service wiring.

Provides ``db_session``, the bearer-token ``get_current_caller`` dependency
used across all protected routes, and per-request service factories.
"""

from __future__ import annotations

from functools import lru_cache
from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import unwrap
from auth.jwt import CallerIdentity, TokenService, build_token_service
from auth.password import PasswordHasher, default_hasher
from auth.service import AuthenticationService
from config.settings import config
from core.errors import ErrorKind, Result
from core.task_service import TaskService
from core.user_service import UserService
from database.session import get_db_session
from database.tasks import TaskStore
from database.users import UserDirectory

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Process-wide token service, built once from settings."""
    return build_token_service()


def get_password_hasher() -> PasswordHasher:
    return default_hasher


def _unauthenticated(detail: str) -> Result[CallerIdentity]:
    return Result.failure(ErrorKind.UNAUTHENTICATED, detail)


async def get_optional_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[CallerIdentity]:
    """
    Return the caller identity when a bearer token is present.

    A token that is present but invalid is still rejected with 401.
    """
    if credentials is None:
        return None
    caller = tokens.validate(credentials.credentials)
    if caller is None:
        unwrap(_unauthenticated("Invalid or expired token"))
    return caller


async def get_current_caller(
    caller: Optional[CallerIdentity] = Depends(get_optional_caller),
) -> CallerIdentity:
    """Extract and verify the Bearer token, returning the authenticated caller."""
    if caller is None:
        unwrap(_unauthenticated("Missing Bearer token"))
    return caller


async def get_task_listing_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Optional[CallerIdentity]:
    """
    Gate for the all-tasks listing.

    While listing is public the bearer header is ignored entirely, so a stale
    token does not lock a client out of a public read.
    """
    if config.public_task_listing:
        return None
    caller = await get_optional_caller(credentials, tokens)
    return await get_current_caller(caller)


def get_user_directory(
    session: AsyncSession = Depends(db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserDirectory:
    return UserDirectory(session, hasher=hasher, admin_emails=config.admin_emails)


def get_user_service(users: UserDirectory = Depends(get_user_directory)) -> UserService:
    return UserService(users)


def get_task_service(users: UserDirectory = Depends(get_user_directory)) -> TaskService:
    return TaskService(TaskStore(users.session, users))


def get_auth_service(
    users: UserDirectory = Depends(get_user_directory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticationService:
    return AuthenticationService(users, hasher, tokens)
