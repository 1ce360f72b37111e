"""
Translate service ``Result`` failures into HTTP errors.
"""

from __future__ import annotations

from typing import Dict, TypeVar

from fastapi import HTTPException, status

from core.errors import ErrorKind, Result

T = TypeVar("T")

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.EMAIL_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
}


def unwrap(result: Result[T]) -> T:
    """Return the success value or raise the matching ``HTTPException``."""
    if result.ok:
        return result.value
    headers = None
    if result.error in (ErrorKind.UNAUTHENTICATED, ErrorKind.INVALID_CREDENTIALS):
        headers = {"WWW-Authenticate": "Bearer"}
    raise HTTPException(
        status_code=STATUS_BY_KIND[result.error],
        detail=result.message,
        headers=headers,
    )
