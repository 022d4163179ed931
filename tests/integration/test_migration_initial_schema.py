from __future__ import annotations

from pathlib import Path

import sqlalchemy as sa
from alembic.config import Config

from alembic import command


def _upgrade_head(tmp_path: Path) -> str:
    db_path = tmp_path / "initial_schema_migration.db"
    database_url = f"sqlite+pysqlite:///{db_path}"

    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", database_url)

    command.upgrade(alembic_config, "head")
    return database_url


def test_migration_creates_required_tables(tmp_path: Path) -> None:
    database_url = _upgrade_head(tmp_path)
    engine = sa.create_engine(database_url)

    table_names = set(sa.inspect(engine).get_table_names())

    assert {"users", "preferences", "combinations"} <= table_names


def test_migration_creates_required_uniques_and_indexes(tmp_path: Path) -> None:
    database_url = _upgrade_head(tmp_path)
    engine = sa.create_engine(database_url)
    inspector = sa.inspect(engine)

    users_uniques = {
        tuple(constraint["column_names"])
        for constraint in inspector.get_unique_constraints("users")
    }
    assert ("email",) in users_uniques
    assert ("username",) in users_uniques

    preferences_uniques = {
        tuple(constraint["column_names"])
        for constraint in inspector.get_unique_constraints("preferences")
    }
    assert ("user_id",) in preferences_uniques

    combinations_indexes = {index["name"] for index in inspector.get_indexes("combinations")}
    assert "ix_combinations_user_id_created_at" in combinations_indexes


def test_migration_downgrade_removes_tables(tmp_path: Path) -> None:
    database_url = _upgrade_head(tmp_path)
    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", database_url)

    command.downgrade(alembic_config, "base")

    table_names = set(sa.inspect(sa.create_engine(database_url)).get_table_names())
    assert not {"users", "preferences", "combinations"} & table_names
