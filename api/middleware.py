"""
Global middleware and exception handlers.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response


def _field_name(loc) -> str:
    # ("body", "dueDate") -> "dueDate"
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    """Return malformed request bodies as 400 with a per-field breakdown."""

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = {}
        for err in exc.errors():
            errors.setdefault(_field_name(err.get("loc", ())), err.get("msg", "Invalid value"))
        logger.info("Validation failed on %s %s: %s", request.method, request.url.path, list(errors))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "status": status.HTTP_400_BAD_REQUEST,
                "error": "Validation Failed",
                "message": "Input validation failed",
                "validationErrors": errors,
                "path": request.url.path,
            },
        )
