"""
Domain exceptions raised by services and mapped once to HTTP responses.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message: str | None = None, fields: tuple[str, ...] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class InvalidCredentialsError(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"


class MissingTokenError(ServiceError):
    status_code = 401
    default_message = "Access token required"


class InvalidTokenError(ServiceError):
    status_code = 403
    default_message = "Invalid or expired token"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    status_code = 409
    default_message = "Conflict"


class EmailTakenError(ConflictError):
    default_message = "Email already exists"


class StorageError(ServiceError):
    status_code = 500
    default_message = "Database error"
