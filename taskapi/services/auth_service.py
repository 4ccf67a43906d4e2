"""
Registration, login and profile use cases.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from taskapi.core.errors import InvalidCredentialsError, NotFoundError
from taskapi.core.security import Authenticator
from taskapi.core.utils import isoformat_utc
from taskapi.db.models import User
from taskapi.repositories.sql_repository import UserRepository
from taskapi.services.validation import validate_login, validate_profile_changes, validate_signup

logger = logging.getLogger(__name__)


def public_user(user: User) -> dict[str, Any]:
    """Fields safe to return to clients; never the password hash."""
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "created_at": isoformat_utc(user.created_at),
    }


@dataclass
class AuthResult:
    user: dict[str, Any]
    token: str


class UserService:
    """Handles signup, login and profile reads/updates."""

    def __init__(self, repository: UserRepository, authenticator: Authenticator):
        self.repository = repository
        self.authenticator = authenticator

    def _result(self, user: User) -> AuthResult:
        token = self.authenticator.issue_token(user.id, user.email)
        return AuthResult(user=public_user(user), token=token)

    # -------------------------------------- signup --------------------------------------
    async def create_user(self, email: Any, password: Any, name: Any) -> AuthResult:
        email, password, name = validate_signup(email, password, name)
        password_hash = await asyncio.to_thread(self.authenticator.hash_password, password)
        user = await self.repository.create_user(email, password_hash, name)
        logger.info("Registered user %s (%s)", user.id, user.email)
        return self._result(user)

    # -------------------------------------- login --------------------------------------
    async def authenticate(self, email: Any, password: Any) -> AuthResult:
        email, password = validate_login(email, password)
        user = await self.repository.get_user_by_email(email)
        if user is None:
            logger.info("Login rejected: unknown email")
            raise InvalidCredentialsError()
        valid = await asyncio.to_thread(self.authenticator.verify_password, password, user.password_hash)
        if not valid:
            logger.info("Login rejected for user %s: bad password", user.id)
            raise InvalidCredentialsError()
        logger.info("Login: user %s", user.id)
        return self._result(user)

    # -------------------------------------- profile --------------------------------------
    async def get_profile(self, user_id: int) -> dict[str, Any]:
        user = await self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return public_user(user)

    async def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> dict[str, Any]:
        values = validate_profile_changes(changes)
        user = await self.repository.update_user(user_id, values)
        if user is None:
            raise NotFoundError("User not found")
        logger.info("Updated profile of user %s (%s)", user_id, ", ".join(sorted(values)))
        return public_user(user)
