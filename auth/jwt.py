"""
JWT-style session token creation and verification.

Tokens are url-safe base64-encoded JSON payloads signed with HMAC-SHA256::

    <base64(payload)>.<hex signature>

The payload carries the user's email as ``sub``, the ``user_id`` claim,
``iat`` and ``exp`` (unix seconds).  Tokens are stateless: there is no
revocation list, and rotating the secret invalidates every outstanding
token at once.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import logging
import time
import uuid
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from config.settings import config

logger = logging.getLogger(__name__)


class CallerIdentity(BaseModel):
    """Who is making the request, as proven by a valid token."""

    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    email: str


class TokenService:
    def __init__(
        self,
        secret: str,
        lifetime_seconds: int = 86400,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret.encode()
        self.lifetime_seconds = lifetime_seconds
        self._clock = clock

    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue(self, email: str, user_id: uuid.UUID | str) -> str:
        """Create a signed token for ``email`` / ``user_id``."""
        now = int(self._clock())
        payload = {
            "sub": email,
            "user_id": str(user_id),
            "iat": now,
            "exp": now + self.lifetime_seconds,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return urlsafe_b64encode(raw).decode() + "." + self._sign(raw)

    def validate(self, token: str) -> Optional[CallerIdentity]:
        """
        Verify ``token`` and return the embedded identity.

        Returns ``None`` when the token is malformed, the signature does not
        match, or the current time is at or past its expiry.
        """
        parts = token.split(".")
        if len(parts) != 2:
            return None
        encoded, signature = parts
        try:
            raw = urlsafe_b64decode(encoded.encode())
        except (binascii.Error, ValueError):
            return None

        if not hmac.compare_digest(signature.encode(), self._sign(raw).encode()):
            return None

        try:
            payload = json.loads(raw)
            email = payload["sub"]
            user_id = uuid.UUID(payload["user_id"])
            exp = payload["exp"]
        except (ValueError, KeyError, TypeError, AttributeError):
            return None
        if not isinstance(email, str) or isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return None

        if self._clock() >= exp:
            logger.debug("Rejected expired token for user %s", user_id)
            return None
        return CallerIdentity(user_id=user_id, email=email)


def build_token_service() -> TokenService:
    """Build the process-wide token service from settings (called once)."""
    if config.uses_default_secret:
        logger.warning(
            "JWT_SECRET is not set — session tokens are signed with the default "
            "placeholder secret. Set JWT_SECRET for any shared deployment."
        )
    return TokenService(config.jwt_secret, config.jwt_expiry_seconds)
