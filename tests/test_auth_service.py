from __future__ import annotations

import pytest

from taskapi.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)


async def test_signup_then_login_issues_verifiable_token(user_service, authenticator):
    created = await user_service.create_user("a@x.com", "p1", "A")
    logged_in = await user_service.authenticate("a@x.com", "p1")

    assert logged_in.user == created.user
    claims = authenticator.verify_token(logged_in.token)
    assert claims.sub == created.user["id"]
    assert claims.email == "a@x.com"


async def test_signup_never_exposes_password_hash(user_service, user_repo):
    result = await user_service.create_user("a@x.com", "p1", "A")

    assert set(result.user) == {"id", "email", "name", "created_at"}
    stored = await user_repo.get_user(result.user["id"])
    assert stored.password_hash != "p1"


@pytest.mark.parametrize(
    "password,name",
    [("p1", "A"), ("other", "A"), ("p1", "Someone else"), ("x", "y")],
)
async def test_duplicate_email_always_conflicts(user_service, password, name):
    await user_service.create_user("a@x.com", "p1", "A")
    with pytest.raises(ConflictError):
        await user_service.create_user("a@x.com", password, name)


@pytest.mark.parametrize(
    "email,password,name,missing",
    [
        ("", "p1", "A", ("email",)),
        ("a@x.com", None, "A", ("password",)),
        ("a@x.com", "p1", "   ", ("name",)),
        (None, None, None, ("email", "password", "name")),
    ],
)
async def test_signup_requires_all_fields(user_service, email, password, name, missing):
    with pytest.raises(ValidationError) as info:
        await user_service.create_user(email, password, name)
    assert info.value.fields == missing


async def test_unknown_email_and_wrong_password_look_the_same(user_service):
    await user_service.create_user("a@x.com", "p1", "A")

    with pytest.raises(InvalidCredentialsError) as unknown:
        await user_service.authenticate("nobody@x.com", "p1")
    with pytest.raises(InvalidCredentialsError) as wrong:
        await user_service.authenticate("a@x.com", "p2")

    assert unknown.value.message == wrong.value.message
    assert unknown.value.status_code == wrong.value.status_code == 401


async def test_login_requires_email_and_password(user_service):
    with pytest.raises(ValidationError):
        await user_service.authenticate("a@x.com", "")


async def test_profile_read_and_partial_update(user_service):
    created = await user_service.create_user("a@x.com", "p1", "A")
    user_id = created.user["id"]

    profile = await user_service.get_profile(user_id)
    assert profile["email"] == "a@x.com"

    updated = await user_service.update_profile(user_id, {"name": "Alice"})
    assert updated["name"] == "Alice"
    assert updated["email"] == "a@x.com"
    assert updated["created_at"] == profile["created_at"]


async def test_profile_update_requires_a_field(user_service):
    created = await user_service.create_user("a@x.com", "p1", "A")
    with pytest.raises(ValidationError):
        await user_service.update_profile(created.user["id"], {})
    with pytest.raises(ValidationError):
        await user_service.update_profile(created.user["id"], {"name": "", "email": None})


async def test_profile_update_conflicts_on_taken_email(user_service):
    await user_service.create_user("a@x.com", "p1", "A")
    bob = await user_service.create_user("b@x.com", "p2", "B")

    with pytest.raises(ConflictError):
        await user_service.update_profile(bob.user["id"], {"email": "a@x.com"})


async def test_changed_email_is_used_for_login(user_service):
    created = await user_service.create_user("a@x.com", "p1", "A")
    await user_service.update_profile(created.user["id"], {"email": "new@x.com"})

    assert (await user_service.authenticate("new@x.com", "p1")).user["id"] == created.user["id"]
    with pytest.raises(InvalidCredentialsError):
        await user_service.authenticate("a@x.com", "p1")


async def test_missing_profile_is_not_found(user_service):
    with pytest.raises(NotFoundError):
        await user_service.get_profile(12345)
