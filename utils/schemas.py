"""
Pydantic schemas for requests and responses, plus the record → schema mappers.

JSON field names are camelCase (``firstName``, ``dueDate``); Python
attributes stay snake_case.  Response models never carry the password
digest or the admin flag.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from database.models import Task, TaskStatus, User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ═══════════════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════════════


class UserCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=128)
    last_name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=1, max_length=72)
    date_of_birth: date


class UserUpdate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=128)
    last_name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    date_of_birth: Optional[date] = None


class UserRead(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    date_of_birth: date
    created_at: datetime
    updated_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Tasks
# ═══════════════════════════════════════════════════════════════════════════════


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: date
    status: Optional[TaskStatus] = None


class TaskUpdate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: date
    status: TaskStatus


class TaskRead(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    due_date: date
    status: TaskStatus
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════════════════════


class LoginRequest(CamelModel):
    email: str
    password: str


class AuthResponse(CamelModel):
    token: str
    type: str = "Bearer"
    user_id: uuid.UUID
    email: str


# ── Mapping ──────────────────────────────────────────────────────────────


def _utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are always stored as UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def user_to_read(user: User) -> UserRead:
    return UserRead(
        id=user.user_id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        date_of_birth=user.date_of_birth,
        created_at=_utc(user.created_at),
        updated_at=_utc(user.updated_at),
    )


def task_to_read(task: Task) -> TaskRead:
    return TaskRead(
        id=task.task_id,
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        status=task.status,
        user_id=task.owner_id,
        created_at=_utc(task.created_at),
        updated_at=_utc(task.updated_at),
    )
