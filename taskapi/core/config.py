"""
Configuration helpers for the task API.

Settings are read once from the environment and passed explicitly to the
pieces that need them (authenticator, database, app factory).
"""

from dataclasses import dataclass
from functools import lru_cache
import os


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    jwt_secret: str
    app_env: str = "dev"
    token_ttl_seconds: int = 86400
    database_url: str = "sqlite+aiosqlite:///:memory:"
    password_time_cost: int = 3
    password_memory_cost: int = 65536
    password_parallelism: int = 4
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    def __post_init__(self):
        if not (self.jwt_secret or "").strip():
            raise ConfigurationError("JWT_SECRET must be configured.")


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            return default
        items = tuple(item.strip() for item in value.split(",") if item.strip())
        return items or default

    return Settings(
        jwt_secret=os.getenv("JWT_SECRET", ""),
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        token_ttl_seconds=_int(os.getenv("TOKEN_TTL_SECONDS"), 86400),
        database_url=os.getenv("DATABASE_URL") or "sqlite+aiosqlite:///:memory:",
        password_time_cost=_int(os.getenv("PASSWORD_HASH_TIME_COST"), 3),
        password_memory_cost=_int(os.getenv("PASSWORD_HASH_MEMORY_COST"), 65536),
        password_parallelism=_int(os.getenv("PASSWORD_HASH_PARALLELISM"), 4),
        cors_origins=_list(os.getenv("CORS_ORIGINS"), ("*",)),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT"), 3000),
    )
