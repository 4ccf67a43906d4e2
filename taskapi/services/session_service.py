"""Session helpers (bearer extraction, token validation, request identity)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from taskapi.core.errors import InvalidTokenError, MissingTokenError
from taskapi.core.security import Authenticator, TokenError

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "authorization"


@dataclass(frozen=True)
class Identity:
    id: int
    email: str


def extract_bearer_token(header: Optional[str]) -> str:
    """Return the second whitespace-delimited segment of the Authorization header."""
    parts = (header or "").split()
    if len(parts) < 2:
        raise MissingTokenError()
    return parts[1]


class SessionGuard:
    """Turns a raw Authorization header into the caller's identity."""

    def __init__(self, authenticator: Authenticator):
        self.authenticator = authenticator

    def authenticate(self, header: Optional[str]) -> Identity:
        token = extract_bearer_token(header)
        try:
            claims = self.authenticator.verify_token(token)
        except TokenError as exc:
            logger.debug("Rejected bearer token: %s", exc)
            raise InvalidTokenError() from exc
        return Identity(id=claims.sub, email=claims.email)


def current_identity(request: Request) -> Identity:
    """FastAPI dependency: authenticate the request and stash the identity on it."""
    guard: SessionGuard = request.app.state.session_guard
    identity = guard.authenticate(request.headers.get(AUTHORIZATION_HEADER))
    request.state.identity = identity
    return identity
