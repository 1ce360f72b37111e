"""
Tests for session token issuance and validation.
"""

import json
import uuid
from base64 import urlsafe_b64decode, urlsafe_b64encode

import pytest

from auth.jwt import CallerIdentity, TokenService
from conftest import SECRET


def _forge(service: TokenService, payload) -> str:
    """Sign an arbitrary payload with the service's own key."""
    raw = json.dumps(payload).encode()
    return urlsafe_b64encode(raw).decode() + "." + service._sign(raw)


class TestIssueAndValidate:
    def test_round_trip(self, tokens):
        user_id = uuid.uuid4()
        token = tokens.issue("john@example.com", user_id)

        caller = tokens.validate(token)
        assert caller == CallerIdentity(user_id=user_id, email="john@example.com")

    def test_payload_claims(self, tokens, clock):
        user_id = uuid.uuid4()
        token = tokens.issue("john@example.com", user_id)
        encoded = token.split(".")[0]
        payload = json.loads(urlsafe_b64decode(encoded))
        assert payload["sub"] == "john@example.com"
        assert payload["user_id"] == str(user_id)
        assert payload["iat"] == int(clock.now)
        assert payload["exp"] == int(clock.now) + 3600

    def test_default_lifetime_is_24_hours(self):
        assert TokenService(SECRET).lifetime_seconds == 86400

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenService("")


class TestExpiry:
    def test_valid_just_before_expiry(self, tokens, clock):
        token = tokens.issue("a@example.com", uuid.uuid4())
        clock.advance(3599)
        assert tokens.validate(token) is not None

    def test_invalid_exactly_at_expiry(self, tokens, clock):
        token = tokens.issue("a@example.com", uuid.uuid4())
        clock.advance(3600)
        assert tokens.validate(token) is None

    def test_invalid_after_expiry(self, tokens, clock):
        token = tokens.issue("a@example.com", uuid.uuid4())
        clock.advance(10_000)
        assert tokens.validate(token) is None


class TestTampering:
    def test_tampered_signature(self, tokens):
        token = tokens.issue("a@example.com", uuid.uuid4())
        body, sig = token.split(".")
        flipped = ("0" if sig[-1] != "0" else "1")
        assert tokens.validate(f"{body}.{sig[:-1]}{flipped}") is None

    def test_tampered_payload(self, tokens, clock):
        token = tokens.issue("a@example.com", uuid.uuid4())
        _, sig = token.split(".")
        other = json.dumps({
            "sub": "a@example.com",
            "user_id": str(uuid.uuid4()),
            "iat": int(clock.now),
            "exp": int(clock.now) + 3600,
        }).encode()
        assert tokens.validate(urlsafe_b64encode(other).decode() + "." + sig) is None

    def test_other_secret_rejected(self, tokens, clock):
        other = TokenService("another-secret", lifetime_seconds=3600, clock=clock)
        token = other.issue("a@example.com", uuid.uuid4())
        assert tokens.validate(token) is None

    def test_rotating_secret_invalidates_outstanding_tokens(self, clock):
        old = TokenService("old-secret", clock=clock)
        token = old.issue("a@example.com", uuid.uuid4())
        assert TokenService("new-secret", clock=clock).validate(token) is None


class TestMalformed:
    @pytest.mark.parametrize(
        "token",
        ["", "garbage", "a.b.c", "!!!.deadbeef", ".", "é.é"],
    )
    def test_garbage(self, tokens, token):
        assert tokens.validate(token) is None

    def test_signed_non_json(self, tokens):
        raw = b"not json"
        token = urlsafe_b64encode(raw).decode() + "." + tokens._sign(raw)
        assert tokens.validate(token) is None

    def test_missing_user_id(self, tokens, clock):
        token = _forge(tokens, {"sub": "a@example.com", "exp": clock.now + 60})
        assert tokens.validate(token) is None

    def test_non_uuid_user_id(self, tokens, clock):
        token = _forge(tokens, {"sub": "a@example.com", "user_id": "42", "exp": clock.now + 60})
        assert tokens.validate(token) is None

    def test_non_numeric_expiry(self, tokens):
        token = _forge(tokens, {"sub": "a@example.com", "user_id": str(uuid.uuid4()), "exp": "never"})
        assert tokens.validate(token) is None

    def test_payload_not_an_object(self, tokens):
        assert tokens.validate(_forge(tokens, ["sub", "user_id"])) is None
