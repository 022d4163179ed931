from __future__ import annotations

from pathlib import Path
from uuid import UUID, uuid4

import pytest
import sqlalchemy as sa
from alembic.config import Config

from alembic import command
from style_api.application.ports.combination_repository_port import (
    CombinationCreateInput,
    CombinationImagesUpdate,
)
from style_api.infrastructure.db.combination_repository import SqlAlchemyCombinationRepository
from style_api.infrastructure.db.session import create_session_factory


def _upgrade_head(tmp_path: Path, filename: str) -> tuple[str, str]:
    db_path = tmp_path / filename
    sync_url = f"sqlite+pysqlite:///{db_path}"
    async_url = f"sqlite+aiosqlite:///{db_path}"

    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", sync_url)
    command.upgrade(alembic_config, "head")

    return sync_url, async_url


def _insert_user(connection: sa.Connection, *, user_id: UUID, username: str) -> None:
    connection.execute(
        sa.text(
            "INSERT INTO users (id, email, username, name, password_hash) "
            "VALUES (:id, :email, :username, :name, :password_hash)"
        ),
        {
            "id": user_id.hex,
            "email": f"{username}@example.com",
            "username": username,
            "name": username.title(),
            "password_hash": "hash",
        },
    )


def _payload(owner_id: UUID, *, name: str) -> CombinationCreateInput:
    return CombinationCreateInput(
        user_id=owner_id,
        name=name,
        description="",
        upper_image=f"https://storage.example/{name}-upper.png",
        lower_image=f"https://storage.example/{name}-lower.png",
    )


@pytest.mark.asyncio
async def test_list_by_user_returns_owned_rows_newest_first(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "combination_repo_list.db")
    owner_id = uuid4()
    other_id = uuid4()
    engine = sa.create_engine(sync_url)
    with engine.begin() as connection:
        _insert_user(connection, user_id=owner_id, username="ana")
        _insert_user(connection, user_id=other_id, username="bia")

    repo = SqlAlchemyCombinationRepository(create_session_factory(async_url))
    first = await repo.create_combination(_payload(owner_id, name="first"))
    await repo.create_combination(_payload(other_id, name="foreign"))
    second = await repo.create_combination(_payload(owner_id, name="second"))

    listed = await repo.list_by_user(user_id=owner_id)

    assert [row.combination_id for row in listed] == [
        second.combination_id,
        first.combination_id,
    ]
    assert await repo.list_by_user(user_id=uuid4()) == []


@pytest.mark.asyncio
async def test_update_images_rewrites_only_supplied_slots(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "combination_repo_update.db")
    owner_id = uuid4()
    engine = sa.create_engine(sync_url)
    with engine.begin() as connection:
        _insert_user(connection, user_id=owner_id, username="ana")

    repo = SqlAlchemyCombinationRepository(create_session_factory(async_url))
    created = await repo.create_combination(_payload(owner_id, name="office"))

    updated = await repo.update_images(
        combination_id=created.combination_id,
        payload=CombinationImagesUpdate(lower_image="https://storage.example/new-lower.png"),
    )

    assert updated is not None
    assert updated.upper_image == created.upper_image
    assert updated.lower_image == "https://storage.example/new-lower.png"
    assert await repo.get_by_id(combination_id=created.combination_id) == updated
    assert (
        await repo.update_images(
            combination_id=uuid4(),
            payload=CombinationImagesUpdate(upper_image="https://storage.example/x.png"),
        )
        is None
    )


@pytest.mark.asyncio
async def test_delete_combination_reports_whether_row_existed(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "combination_repo_delete.db")
    owner_id = uuid4()
    engine = sa.create_engine(sync_url)
    with engine.begin() as connection:
        _insert_user(connection, user_id=owner_id, username="ana")

    repo = SqlAlchemyCombinationRepository(create_session_factory(async_url))
    created = await repo.create_combination(_payload(owner_id, name="weekend"))

    assert await repo.delete_combination(combination_id=created.combination_id) is True
    assert await repo.delete_combination(combination_id=created.combination_id) is False
    assert await repo.get_by_id(combination_id=created.combination_id) is None

    with engine.begin() as connection:
        remaining = connection.execute(sa.text("SELECT COUNT(*) FROM combinations")).scalar_one()
    assert remaining == 0
