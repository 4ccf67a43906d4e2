from __future__ import annotations

import sys
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Make the taskapi package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from taskapi.app import create_app  # noqa: E402
from taskapi.core.security import Authenticator  # noqa: E402
from taskapi.db.session import Database  # noqa: E402
from taskapi.repositories.sql_repository import TaskRepository, UserRepository  # noqa: E402
from taskapi.services.auth_service import UserService  # noqa: E402
from taskapi.services.task_service import TaskService  # noqa: E402
from .factories import make_settings  # noqa: E402


@pytest.fixture()
def settings(tmp_path):
    return make_settings(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")


@pytest.fixture()
def authenticator(settings) -> Authenticator:
    return Authenticator(settings)


@pytest_asyncio.fixture()
async def database(settings):
    """Fresh schema in a temporary SQLite file, disposed after the test."""
    db = Database.from_settings(settings)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest.fixture()
def user_repo(database) -> UserRepository:
    return UserRepository(database)


@pytest.fixture()
def task_repo(database) -> TaskRepository:
    return TaskRepository(database)


@pytest.fixture()
def user_service(user_repo, authenticator) -> UserService:
    return UserService(user_repo, authenticator)


@pytest.fixture()
def task_service(task_repo) -> TaskService:
    return TaskService(task_repo)


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
