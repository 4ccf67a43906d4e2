"""
Presence checks for request payloads.

Each function is pure: it returns the cleaned values or raises a
``ValidationError`` naming the offending fields.
"""

from __future__ import annotations

from typing import Any, Mapping

from taskapi.core.errors import ValidationError

TASK_FIELDS = ("title", "description", "status")
PROFILE_FIELDS = ("name", "email")


def _clean(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError("Fields must be strings")
    return value.strip()


def validate_signup(email: Any, password: Any, name: Any) -> tuple[str, str, str]:
    email_value, name_value = _clean(email), _clean(name)
    password_value = password if isinstance(password, str) else _clean(password)
    missing = tuple(
        field
        for field, value in (("email", email_value), ("password", password_value), ("name", name_value))
        if not value
    )
    if missing:
        raise ValidationError("Email, password, and name are required", fields=missing)
    return email_value, password_value, name_value


def validate_login(email: Any, password: Any) -> tuple[str, str]:
    email_value = _clean(email)
    password_value = password if isinstance(password, str) else _clean(password)
    missing = tuple(
        field for field, value in (("email", email_value), ("password", password_value)) if not value
    )
    if missing:
        raise ValidationError("Email and password are required", fields=missing)
    return email_value, password_value


def validate_profile_changes(changes: Mapping[str, Any]) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for field in PROFILE_FIELDS:
        if field in changes:
            value = _clean(changes[field])
            if value:
                cleaned[field] = value
    if not cleaned:
        raise ValidationError("At least one field (name or email) is required", fields=PROFILE_FIELDS)
    return cleaned


def validate_new_task(title: Any, description: Any = None, status: Any = None) -> tuple[str, str | None, str]:
    title_value = _clean(title)
    if not title_value:
        raise ValidationError("Title is required", fields=("title",))
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be a string", fields=("description",))
    status_value = _clean(status) or "pending"
    return title_value, description, status_value


def validate_task_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Keep only the supplied task fields. ``description`` may be None to clear it;
    ``title`` and ``status`` must be non-empty when present.
    """
    supplied = {field: changes[field] for field in TASK_FIELDS if field in changes}
    if not supplied:
        raise ValidationError("At least one field is required", fields=TASK_FIELDS)
    cleaned: dict[str, Any] = {}
    for field in ("title", "status"):
        if field in supplied:
            value = _clean(supplied[field])
            if not value:
                raise ValidationError(f"{field.capitalize()} cannot be empty", fields=(field,))
            cleaned[field] = value
    if "description" in supplied:
        description = supplied["description"]
        if description is not None and not isinstance(description, str):
            raise ValidationError("Description must be a string", fields=("description",))
        cleaned["description"] = description
    return cleaned
