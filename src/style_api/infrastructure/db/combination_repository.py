"""SQLAlchemy adapter for combination persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from style_api.application.ports.combination_repository_port import (
    CombinationCreateInput,
    CombinationImagesUpdate,
    CombinationRecord,
    CombinationRepositoryPort,
)
from style_api.infrastructure.db.metadata import combinations


class SqlAlchemyCombinationRepository(CombinationRepositoryPort):
    """Combination repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_by_user(self, *, user_id: UUID) -> list[CombinationRecord]:
        """Return combinations owned by one user, newest first."""

        statement = (
            sa.select(*combinations.c)
            .where(combinations.c.user_id == user_id)
            .order_by(combinations.c.created_at.desc(), combinations.c.id)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_combination_record(row) for row in result.mappings().all()]

    async def get_by_id(self, *, combination_id: UUID) -> CombinationRecord | None:
        """Return combination by id or None."""

        statement = sa.select(*combinations.c).where(combinations.c.id == combination_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_combination_record(row)

    async def create_combination(self, payload: CombinationCreateInput) -> CombinationRecord:
        """Insert one combination row and return it."""

        statement = sa.insert(combinations).values(
            id=uuid4(),
            user_id=payload.user_id,
            name=payload.name,
            description=payload.description,
            upper_image=payload.upper_image,
            lower_image=payload.lower_image,
            created_at=datetime.now(tz=UTC),
        ).returning(*combinations.c)

        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()

        return _to_combination_record(result.mappings().one())

    async def update_images(
        self,
        *,
        combination_id: UUID,
        payload: CombinationImagesUpdate,
    ) -> CombinationRecord | None:
        """Write supplied image references in one statement."""

        if payload.is_empty():
            return await self.get_by_id(combination_id=combination_id)

        values: dict[str, str] = {}
        if payload.upper_image is not None:
            values["upper_image"] = payload.upper_image
        if payload.lower_image is not None:
            values["lower_image"] = payload.lower_image

        statement = (
            sa.update(combinations)
            .where(combinations.c.id == combination_id)
            .values(**values)
            .returning(*combinations.c)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()

        row = result.mappings().first()
        if row is None:
            return None
        return _to_combination_record(row)

    async def delete_combination(self, *, combination_id: UUID) -> bool:
        """Delete one row and return whether it existed."""

        statement = sa.delete(combinations).where(combinations.c.id == combination_id)

        async with self._session_factory() as session:
            result = cast(CursorResult[Any], await session.execute(statement))
            await session.commit()

        return int(result.rowcount or 0) > 0


def _to_uuid(value: object) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _to_combination_record(row: sa.RowMapping) -> CombinationRecord:
    return CombinationRecord(
        combination_id=_to_uuid(row["id"]),
        user_id=_to_uuid(row["user_id"]),
        name=cast(str, row["name"]),
        description=cast(str, row["description"]),
        upper_image=cast(str, row["upper_image"]),
        lower_image=cast(str, row["lower_image"]),
        created_at=cast(datetime, row["created_at"]),
    )
