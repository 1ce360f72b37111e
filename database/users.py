"""
User directory — owns ``User`` rows and enforces email uniqueness.

Email uniqueness is checked up front for a clear error, but the ``UNIQUE``
constraint on ``users.email`` is the authority: a concurrent registration
that slips past the pre-check fails at flush time and is reported as
``EMAIL_ALREADY_EXISTS`` just the same.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import PasswordHasher, default_hasher
from core.errors import Result, email_taken, not_found
from database.models import Task, User, utcnow

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(
        self,
        session: AsyncSession,
        hasher: PasswordHasher = default_hasher,
        admin_emails: Iterable[str] = (),
    ) -> None:
        self.session = session
        self.hasher = hasher
        self.admin_emails = frozenset(admin_emails)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def _load(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.user_id == user_id))
        return result.scalar_one_or_none()

    async def _flush_unique(self, email: str) -> Result:
        """Flush pending changes, mapping a unique-email violation to a failure."""
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Email uniqueness constraint rejected write for %s", email)
            return email_taken(email)
        return Result.success()

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        date_of_birth: date,
    ) -> Result[User]:
        if await self.get_by_email(email) is not None:
            return email_taken(email)

        now = utcnow()
        user = User(
            user_id=uuid.uuid4(),
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=self.hasher.hash(password),
            date_of_birth=date_of_birth,
            is_admin=email in self.admin_emails,
            created_at=now,
            updated_at=now,
        )
        self.session.add(user)
        flushed = await self._flush_unique(email)
        if not flushed.ok:
            return flushed.propagate()

        logger.info("Registered user %s", user.user_id)
        return Result.success(user)

    async def get_by_id(self, user_id: uuid.UUID) -> Result[User]:
        user = await self._load(user_id)
        if user is None:
            return not_found("User", user_id)
        return Result.success(user)

    async def update(
        self,
        user_id: uuid.UUID,
        first_name: str,
        last_name: str,
        email: str,
        date_of_birth: Optional[date] = None,
    ) -> Result[User]:
        """Overwrite the mutable profile fields; id and password are left alone."""
        user = await self._load(user_id)
        if user is None:
            return not_found("User", user_id)

        if email != user.email:
            other = await self.get_by_email(email)
            if other is not None and other.user_id != user.user_id:
                return email_taken(email)

        user.first_name = first_name
        user.last_name = last_name
        user.email = email
        if date_of_birth is not None:
            user.date_of_birth = date_of_birth
        user.updated_at = utcnow()

        flushed = await self._flush_unique(email)
        if not flushed.ok:
            return flushed.propagate()
        return Result.success(user)

    async def delete(self, user_id: uuid.UUID) -> Result[None]:
        """Permanently remove a user together with the tasks they own."""
        user = await self._load(user_id)
        if user is None:
            return not_found("User", user_id)

        # Explicit so it also holds where the backend ignores ON DELETE CASCADE.
        await self.session.execute(delete(Task).where(Task.owner_id == user_id))
        await self.session.delete(user)
        await self.session.flush()
        logger.info("Deleted user %s and their tasks", user_id)
        return Result.success()

    async def list_all(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def search_by_name(self, fragment: str) -> List[User]:
        """Case-insensitive substring match over first or last name."""
        result = await self.session.execute(
            select(User)
            .where(
                or_(
                    User.first_name.icontains(fragment, autoescape=True),
                    User.last_name.icontains(fragment, autoescape=True),
                )
            )
            .order_by(User.created_at)
        )
        return list(result.scalars().all())
