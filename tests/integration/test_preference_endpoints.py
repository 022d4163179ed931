from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.config import Config
from fastapi.testclient import TestClient

from alembic import command
from apps.api.main import create_app
from style_api.infrastructure.security.password_hasher import BcryptPasswordHasher
from style_api.infrastructure.security.token_service import JwtTokenService

SECRET = "integration-signing-secret-0123456789abcdef"


class FakeStorage:
    async def put_object(self, *, bucket: str, key: str, body: bytes, content_type: str) -> str:
        return f"https://storage.example/storage/v1/object/public/{bucket}/{key}"

    async def delete_object(self, *, bucket: str, key: str) -> None:
        return None


def _upgrade_head(tmp_path: Path, filename: str) -> tuple[str, str]:
    db_path = tmp_path / filename
    sync_url = f"sqlite+pysqlite:///{db_path}"
    async_url = f"sqlite+aiosqlite:///{db_path}"

    alembic_config = Config("alembic.ini")
    alembic_config.set_main_option("sqlalchemy.url", sync_url)
    command.upgrade(alembic_config, "head")

    return sync_url, async_url


def _build_client(async_url: str) -> TestClient:
    app = create_app(
        database_url=async_url,
        storage=FakeStorage(),
        token_service=JwtTokenService(secret=SECRET),
        password_hasher=BcryptPasswordHasher(rounds=4),
    )
    return TestClient(app)


def _register(client: TestClient) -> dict[str, str]:
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Ana",
            "email": "ana@example.com",
            "username": "ana",
            "password": "secret1",
        },
    )
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.mark.asyncio
async def test_get_preferences_before_saving_returns_empty_object(tmp_path: Path) -> None:
    _, async_url = _upgrade_head(tmp_path, "preferences_empty.db")

    with _build_client(async_url) as client:
        headers = _register(client)
        response = client.get("/api/preferences", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"message": None, "preferences": {}}


@pytest.mark.asyncio
async def test_post_preferences_upserts_a_single_row(tmp_path: Path) -> None:
    sync_url, async_url = _upgrade_head(tmp_path, "preferences_upsert.db")

    with _build_client(async_url) as client:
        headers = _register(client)
        created = client.post(
            "/api/preferences",
            json={"gender": "female", "main_style": "casual"},
            headers=headers,
        )
        resaved = client.post(
            "/api/preferences",
            json={"main_style": "classic", "preferred_color": "navy"},
            headers=headers,
        )
        fetched = client.get("/api/preferences", headers=headers)

    assert created.status_code == 200
    assert created.json()["message"] == "preferences saved"
    assert resaved.json()["preferences"]["id"] == created.json()["preferences"]["id"]
    preferences = fetched.json()["preferences"]
    assert preferences["gender"] == "female"
    assert preferences["main_style"] == "classic"
    assert preferences["preferred_color"] == "navy"
    assert preferences["style_to_avoid"] is None

    with sa.create_engine(sync_url).begin() as connection:
        count = connection.execute(sa.text("SELECT COUNT(*) FROM preferences")).scalar_one()
    assert count == 1


@pytest.mark.asyncio
async def test_put_preferences_requires_existing_row(tmp_path: Path) -> None:
    _, async_url = _upgrade_head(tmp_path, "preferences_put.db")

    with _build_client(async_url) as client:
        headers = _register(client)
        before = client.put("/api/preferences", json={"body_type": "athletic"}, headers=headers)
        client.post("/api/preferences", json={"gender": "female"}, headers=headers)
        after = client.put("/api/preferences", json={"body_type": "athletic"}, headers=headers)

    assert before.status_code == 404
    assert before.json() == {"detail": "preferences not found"}
    assert after.status_code == 200
    assert after.json()["message"] == "preferences updated"
    assert after.json()["preferences"]["gender"] == "female"
    assert after.json()["preferences"]["body_type"] == "athletic"


@pytest.mark.asyncio
async def test_preferences_reject_unknown_fields_and_anonymous_callers(tmp_path: Path) -> None:
    _, async_url = _upgrade_head(tmp_path, "preferences_invalid.db")

    with _build_client(async_url) as client:
        headers = _register(client)
        unknown = client.post("/api/preferences", json={"shoe_size": "38"}, headers=headers)
        anonymous = client.get("/api/preferences")

    assert unknown.status_code == 400
    assert anonymous.status_code == 401
