"""
Security helpers: password hashing and signed session tokens.

Passwords are hashed with Argon2 (salted, tunable cost). Tokens are a
base64url JSON payload followed by an HMAC-SHA256 hex signature, keyed with
the configured secret.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import time
from base64 import b64decode, urlsafe_b64encode
from dataclasses import dataclass
from typing import Callable

from argon2 import PasswordHasher, exceptions as argon_exc

from taskapi.core.config import Settings


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenInvalidError(TokenError):
    pass


class TokenExpiredError(TokenError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    sub: int
    email: str
    exp: int


def _b64encode(raw: bytes) -> str:
    return urlsafe_b64encode(raw).decode().rstrip("=")


def _b64decode(value: str) -> bytes:
    """Strict base64url decode: only the canonical unpadded encoding is accepted."""
    padding = "=" * (-len(value) % 4)
    raw = b64decode(value + padding, altchars=b"-_", validate=True)
    if _b64encode(raw) != value:
        raise ValueError("non-canonical base64url")
    return raw


class Authenticator:
    """Hashes passwords and issues/verifies bearer tokens for one secret."""

    def __init__(self, settings: Settings, *, clock: Callable[[], float] = time.time):
        self._secret = settings.jwt_secret.encode()
        self._ttl = settings.token_ttl_seconds
        self._clock = clock
        self._hasher = PasswordHasher(
            time_cost=settings.password_time_cost,
            memory_cost=settings.password_memory_cost,
            parallelism=settings.password_parallelism,
        )

    # -------------------------------------- passwords --------------------------------------
    def hash_password(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify_password(self, password: str, stored_hash: str | None) -> bool:
        if not stored_hash:
            return False
        try:
            return self._hasher.verify(stored_hash, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False

    # -------------------------------------- tokens --------------------------------------
    def _sign(self, raw: bytes) -> str:
        return hmac.new(self._secret, raw, hashlib.sha256).hexdigest()

    def issue_token(self, user_id: int, email: str) -> str:
        """Create a signed token for ``user_id`` valid for the configured ttl."""
        payload = {
            "sub": user_id,
            "email": email,
            "exp": int(self._clock()) + self._ttl,
        }
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return _b64encode(raw) + "." + self._sign(raw)

    def verify_token(self, token: str) -> TokenClaims:
        """
        Verify ``token`` and return its claims.

        Raises ``TokenInvalidError`` for malformed or tampered tokens and
        ``TokenExpiredError`` once ``exp`` has been reached.
        """
        encoded, sep, signature = (token or "").partition(".")
        if not sep or not encoded or not signature:
            raise TokenInvalidError("bad format")
        try:
            raw = _b64decode(encoded)
        except (binascii.Error, ValueError) as exc:
            raise TokenInvalidError("bad encoding") from exc
        if not hmac.compare_digest(signature.encode(), self._sign(raw).encode()):
            raise TokenInvalidError("bad signature")
        try:
            payload = json.loads(raw)
            claims = TokenClaims(
                sub=int(payload["sub"]),
                email=str(payload["email"]),
                exp=int(payload["exp"]),
            )
        except (ValueError, TypeError, KeyError) as exc:
            raise TokenInvalidError("bad payload") from exc
        if self._clock() >= claims.exp:
            raise TokenExpiredError("token expired")
        return claims
