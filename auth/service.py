"""
Authentication — verify email + password and issue a session token.
"""

from __future__ import annotations

import logging
import uuid

from pydantic import BaseModel

from auth.jwt import TokenService
from auth.password import PasswordHasher
from core.errors import ErrorKind, Result
from database.users import UserDirectory

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class IssuedToken(BaseModel):
    token: str
    user_id: uuid.UUID
    email: str


class AuthenticationService:
    def __init__(
        self,
        users: UserDirectory,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def login(self, email: str, password: str) -> Result[IssuedToken]:
        """
        Unknown email and wrong password fail identically so the response
        cannot be used to probe which accounts exist.
        """
        user = await self.users.get_by_email(email)
        if user is None or not self.hasher.verify(password, user.password_hash):
            logger.info("Rejected login attempt")
            return Result.failure(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        token = self.tokens.issue(user.email, user.user_id)
        logger.info("Login: user %s", user.user_id)
        return Result.success(IssuedToken(token=token, user_id=user.user_id, email=user.email))
