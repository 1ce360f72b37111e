"""
Auth API routes — login.

Route prefix: /api/v1/auth
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.errors import unwrap
from auth.dependencies import get_auth_service
from auth.service import AuthenticationService
from utils.schemas import AuthResponse, LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    auth: AuthenticationService = Depends(get_auth_service),
) -> AuthResponse:
    """Login with email + password."""
    issued = unwrap(await auth.login(req.email, req.password))
    return AuthResponse(token=issued.token, user_id=issued.user_id, email=issued.email)
