"""SQLAlchemy adapter for user persistence."""

from __future__ import annotations

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from style_api.application.ports.user_repository_port import (
    DuplicateUserError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
    UserUpdateInput,
)
from style_api.infrastructure.db.metadata import users

_UNIQUE_MARKERS = (
    "users.email",
    "users.username",
    "uq_users_email",
    "uq_users_username",
)


def _is_duplicate_user_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return any(marker in message for marker in _UNIQUE_MARKERS)


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

        return await self._get_one(users.c.id == user_id)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

        return await self._get_one(users.c.email == email)

    async def get_by_username(self, *, username: str) -> UserRecord | None:
        """Return user by username or None."""

        return await self._get_one(users.c.username == username)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user row and return it; unique collisions become DuplicateUserError."""

        statement = sa.insert(users).values(
            id=uuid4(),
            name=payload.name,
            email=payload.email,
            username=payload.username,
            password_hash=payload.password_hash,
        ).returning(*users.c)

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_user_error(error):
                    raise DuplicateUserError("email or username already in use") from error
                raise

        return _to_user_record(result.mappings().one())

    async def update_user(self, *, user_id: UUID, payload: UserUpdateInput) -> UserRecord | None:
        """Apply a partial update and return the updated row, or None if missing."""

        values = payload.values()
        if not values:
            return await self.get_by_id(user_id=user_id)

        statement = (
            sa.update(users)
            .where(users.c.id == user_id)
            .values(**values, updated_at=sa.text("CURRENT_TIMESTAMP"))
            .returning(*users.c)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_user_error(error):
                    raise DuplicateUserError("username already in use") from error
                raise

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def _get_one(self, condition: sa.ColumnElement[bool]) -> UserRecord | None:
        statement = sa.select(*users.c).where(condition).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        email=cast(str, row["email"]),
        username=cast(str, row["username"]),
        name=cast(str, row["name"]),
        password_hash=cast(str, row["password_hash"]),
        bio=cast(str | None, row["bio"]),
        profile_image=cast(str | None, row["profile_image"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
