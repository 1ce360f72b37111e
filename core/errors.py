"""
Error kinds and the ``Result`` value returned by stores and services.

Domain failures (not found, forbidden, duplicate email, …) are returned as
values rather than raised, so the calling layer decides how each one is
surfaced.  Only the HTTP boundary turns them into exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    VALIDATION = "validation"


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "Result[T]":
        return cls(error=error, message=message)

    def propagate(self) -> "Result":
        """Re-wrap a failure so it can be returned from a differently-typed call."""
        return Result(error=self.error, message=self.message)


def not_found(resource: str, resource_id) -> Result:
    return Result.failure(ErrorKind.NOT_FOUND, f"{resource} not found with id: {resource_id}")


def email_taken(email: str) -> Result:
    return Result.failure(ErrorKind.EMAIL_ALREADY_EXISTS, f"Email already exists: {email}")
