"""
Application factory: wires settings, storage, services and routers.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from taskapi import __version__
from taskapi.core.config import Settings, get_settings
from taskapi.core.errors import ServiceError
from taskapi.core.security import Authenticator
from taskapi.core.utils import isoformat_utc, utcnow
from taskapi.db.session import Database
from taskapi.repositories.sql_repository import TaskRepository, UserRepository
from taskapi.routers import auth as auth_router
from taskapi.routers import profile as profile_router
from taskapi.routers import tasks as tasks_router
from taskapi.services.auth_service import UserService
from taskapi.services.session_service import SessionGuard
from taskapi.services.task_service import TaskService

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        fields = set()
        for err in errors:
            loc = err.get("loc") or ()
            if len(loc) > 1 and isinstance(loc[-1], str):
                fields.add(loc[-1])
        message = "Invalid request body"
        if any(err.get("type") == "json_invalid" for err in errors):
            message = "Malformed JSON body"
        elif fields:
            message = f"Invalid value for: {', '.join(sorted(fields))}"
        logger.warning("%s %s -> 400 %s", request.method, request.url.path, message)
        return _error(400, message)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    database = Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.create_all()
        logger.info("Connected to database %s", database.engine.url.render_as_string(hide_password=True))
        yield
        await database.dispose()
        logger.info("Database connection closed")

    app = FastAPI(title="Task API", version=__version__, lifespan=lifespan)

    authenticator = Authenticator(settings)
    app.state.settings = settings
    app.state.database = database
    app.state.authenticator = authenticator
    app.state.session_guard = SessionGuard(authenticator)
    app.state.user_service = UserService(UserRepository(database), authenticator)
    app.state.task_service = TaskService(TaskRepository(database))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response

    register_error_handlers(app)

    app.include_router(auth_router.router)
    app.include_router(profile_router.router)
    app.include_router(tasks_router.router)

    @app.get("/api/health", tags=["health"])
    async def health():
        return {"status": "ok", "timestamp": isoformat_utc(utcnow())}

    return app
