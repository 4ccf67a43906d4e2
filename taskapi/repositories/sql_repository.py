"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from taskapi.core.errors import EmailTakenError
from taskapi.core.utils import utcnow as _now
from taskapi.db.models import Task, User
from taskapi.db.session import Database


class UserRepository:
    """Credential store: users keyed by id, unique by email."""

    def __init__(self, database: Database):
        self.database = database

    async def get_user(self, user_id: int) -> Optional[User]:
        async with self.database.session() as session:
            return await session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with self.database.session() as session:
            stmt = select(User).where(User.email == email)
            return (await session.execute(stmt)).scalar_one_or_none()

    async def create_user(self, email: str, password_hash: str, name: str) -> User:
        user = User(email=email, password_hash=password_hash, name=name, created_at=_now())
        async with self.database.session() as session:
            session.add(user)
            try:
                await session.flush()
            except IntegrityError as exc:
                raise EmailTakenError() from exc
            await session.commit()
            return user

    async def update_user(self, user_id: int, values: Mapping[str, Any]) -> Optional[User]:
        """Apply ``values`` to the user row; returns the fresh row or None if absent."""
        async with self.database.session() as session:
            stmt = update(User).where(User.id == user_id).values(**values)
            try:
                result = await session.execute(stmt)
            except IntegrityError as exc:
                raise EmailTakenError() from exc
            if result.rowcount == 0:
                return None
            await session.commit()
            return await session.get(User, user_id, populate_existing=True)


class TaskRepository:
    """Task store. Every read and write is filtered by the owning user id."""

    def __init__(self, database: Database):
        self.database = database

    async def create_task(self, owner_id: int, title: str, description: str | None, status: str) -> Task:
        now = _now()
        task = Task(
            owner_id=owner_id,
            title=title,
            description=description,
            status=status,
            created_at=now,
            updated_at=now,
        )
        async with self.database.session() as session:
            session.add(task)
            await session.flush()
            await session.commit()
            return task

    async def list_tasks(self, owner_id: int) -> list[Task]:
        async with self.database.session() as session:
            stmt = (
                select(Task)
                .where(Task.owner_id == owner_id)
                .order_by(Task.created_at.desc(), Task.id.desc())
            )
            return list((await session.execute(stmt)).scalars().all())

    async def get_task(self, owner_id: int, task_id: int) -> Optional[Task]:
        async with self.database.session() as session:
            stmt = select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
            return (await session.execute(stmt)).scalar_one_or_none()

    async def update_task(self, owner_id: int, task_id: int, values: Mapping[str, Any]) -> Optional[Task]:
        """Update the owner's task; returns None when no row matched."""
        async with self.database.session() as session:
            stmt = (
                update(Task)
                .where(Task.id == task_id, Task.owner_id == owner_id)
                .values(**values, updated_at=_now())
            )
            result = await session.execute(stmt)
            if result.rowcount == 0:
                return None
            await session.commit()
            stmt = select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
            return (await session.execute(stmt)).scalar_one_or_none()

    async def delete_task(self, owner_id: int, task_id: int) -> bool:
        async with self.database.session() as session:
            result = await session.execute(
                delete(Task).where(Task.id == task_id, Task.owner_id == owner_id)
            )
            await session.commit()
            return result.rowcount > 0
