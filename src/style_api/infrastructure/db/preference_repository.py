"""SQLAlchemy adapter for per-user style preferences."""

from __future__ import annotations

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from style_api.application.ports.preference_repository_port import (
    PREFERENCE_FIELDS,
    PreferenceRecord,
    PreferenceRepositoryPort,
    PreferenceValues,
)
from style_api.infrastructure.db.metadata import preferences

_UNIQUE_MARKERS = ("preferences.user_id", "uq_preferences_user_id")


def _is_duplicate_preference_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return any(marker in message for marker in _UNIQUE_MARKERS)


class SqlAlchemyPreferenceRepository(PreferenceRepositoryPort):
    """Preference repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_user(self, *, user_id: UUID) -> PreferenceRecord | None:
        statement = sa.select(*preferences.c).where(preferences.c.user_id == user_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_preference_record(row)

    async def create_preferences(
        self,
        *,
        user_id: UUID,
        values: PreferenceValues,
    ) -> PreferenceRecord:
        """Insert the row, or apply the values onto a row created concurrently."""

        statement = sa.insert(preferences).values(
            id=uuid4(),
            user_id=user_id,
            **values.supplied(),
        ).returning(*preferences.c)

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if not _is_duplicate_preference_error(error):
                    raise
                duplicate = error
            else:
                return _to_preference_record(result.mappings().one())

        updated = await self.update_preferences(user_id=user_id, values=values)
        if updated is None:
            raise duplicate
        return updated

    async def update_preferences(
        self,
        *,
        user_id: UUID,
        values: PreferenceValues,
    ) -> PreferenceRecord | None:
        supplied = values.supplied()
        if not supplied:
            return await self.get_by_user(user_id=user_id)

        statement = (
            sa.update(preferences)
            .where(preferences.c.user_id == user_id)
            .values(**supplied, updated_at=sa.text("CURRENT_TIMESTAMP"))
            .returning(*preferences.c)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            await session.commit()

        row = result.mappings().first()
        if row is None:
            return None
        return _to_preference_record(row)


def _to_uuid(value: object) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _to_preference_record(row: sa.RowMapping) -> PreferenceRecord:
    return PreferenceRecord(
        preference_id=_to_uuid(row["id"]),
        user_id=_to_uuid(row["user_id"]),
        values=PreferenceValues(
            **{name: cast(str | None, row[name]) for name in PREFERENCE_FIELDS}
        ),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
