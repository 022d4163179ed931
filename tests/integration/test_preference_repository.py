from __future__ import annotations

import asyncio
from pathlib import Path
from uuid import UUID, uuid4

import pytest
import sqlalchemy as sa
from alembic.config import Config

from alembic import command
from style_api.application.ports.preference_repository_port import PreferenceValues
from style_api.application.services.preference_service import PreferenceService
from style_api.infrastructure.db.preference_repository import SqlAlchemyPreferenceRepository
from style_api.infrastructure.db.session import create_session_factory


def _upgrade_head(tmp_path: Path, filename: str) -> tuple[str, str]:
    db_path = tmp_path / filename
    sync_url = f"sqlite+pysqlite:///{db_path}"
    async_url = f"sqlite+aiosqlite:///{db_path}"

    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", sync_url)
    command.upgrade(alembic_config, "head")

    return sync_url, async_url


def _insert_user(connection: sa.Connection, *, user_id: UUID) -> None:
    connection.execute(
        sa.text(
            "INSERT INTO users (id, email, username, name, password_hash) "
            "VALUES (:id, 'ana@example.com', 'ana', 'Ana', 'hash')"
        ),
        {"id": user_id.hex},
    )


@pytest.mark.asyncio
async def test_create_then_get_preferences(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "preference_repo_create.db")
    user_id = uuid4()
    with sa.create_engine(sync_url).begin() as connection:
        _insert_user(connection, user_id=user_id)
    repo = SqlAlchemyPreferenceRepository(create_session_factory(async_url))

    assert await repo.get_by_user(user_id=user_id) is None

    created = await repo.create_preferences(
        user_id=user_id,
        values=PreferenceValues(gender="female", main_style="casual"),
    )

    assert created.user_id == user_id
    assert created.values == PreferenceValues(gender="female", main_style="casual")
    assert await repo.get_by_user(user_id=user_id) == created


@pytest.mark.asyncio
async def test_update_preferences_keeps_fields_not_supplied(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "preference_repo_update.db")
    user_id = uuid4()
    with sa.create_engine(sync_url).begin() as connection:
        _insert_user(connection, user_id=user_id)
    repo = SqlAlchemyPreferenceRepository(create_session_factory(async_url))
    created = await repo.create_preferences(
        user_id=user_id,
        values=PreferenceValues(gender="female", main_style="casual"),
    )

    updated = await repo.update_preferences(
        user_id=user_id,
        values=PreferenceValues(main_style="classic", common_occasion="work"),
    )

    assert updated is not None
    assert updated.preference_id == created.preference_id
    assert updated.values == PreferenceValues(
        gender="female",
        main_style="classic",
        common_occasion="work",
    )


@pytest.mark.asyncio
async def test_update_preferences_without_row_returns_none(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "preference_repo_missing.db")
    user_id = uuid4()
    with sa.create_engine(sync_url).begin() as connection:
        _insert_user(connection, user_id=user_id)
    repo = SqlAlchemyPreferenceRepository(create_session_factory(async_url))

    assert (
        await repo.update_preferences(user_id=user_id, values=PreferenceValues(gender="male"))
        is None
    )


@pytest.mark.asyncio
async def test_create_preferences_merges_into_existing_row(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "preference_repo_duplicate.db")
    user_id = uuid4()
    with sa.create_engine(sync_url).begin() as connection:
        _insert_user(connection, user_id=user_id)
    repo = SqlAlchemyPreferenceRepository(create_session_factory(async_url))
    first = await repo.create_preferences(
        user_id=user_id,
        values=PreferenceValues(gender="female", main_style="casual"),
    )

    second = await repo.create_preferences(
        user_id=user_id,
        values=PreferenceValues(main_style="classic"),
    )

    assert second.preference_id == first.preference_id
    assert second.values == PreferenceValues(gender="female", main_style="classic")
    with sa.create_engine(sync_url).begin() as connection:
        count = connection.execute(sa.text("SELECT COUNT(*) FROM preferences")).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_concurrent_first_saves_share_one_row(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "preference_repo_concurrent.db")
    user_id = uuid4()
    with sa.create_engine(sync_url).begin() as connection:
        _insert_user(connection, user_id=user_id)
    service = PreferenceService(
        preferences=SqlAlchemyPreferenceRepository(create_session_factory(async_url))
    )

    results = await asyncio.gather(
        service.save_preferences(user_id=user_id, values=PreferenceValues(gender="female")),
        service.save_preferences(user_id=user_id, values=PreferenceValues(main_style="casual")),
    )

    assert results[0].preference_id == results[1].preference_id
    with sa.create_engine(sync_url).begin() as connection:
        count = connection.execute(sa.text("SELECT COUNT(*) FROM preferences")).scalar_one()
    assert count == 1
