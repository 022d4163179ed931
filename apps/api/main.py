"""style api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from style_api.application.dto.user_models import MessageResponse
from style_api.application.ports.object_storage_port import ObjectStoragePort
from style_api.application.ports.password_hasher_port import PasswordHasherPort
from style_api.application.ports.session_token_port import SessionTokenPort
from style_api.application.services.auth_service import AuthService
from style_api.application.services.combination_service import CombinationService
from style_api.application.services.image_lifecycle_service import ImageLifecycleService
from style_api.application.services.preference_service import PreferenceService
from style_api.application.services.profile_service import ProfileService
from style_api.config.settings import Settings, load_settings
from style_api.infrastructure.db.combination_repository import SqlAlchemyCombinationRepository
from style_api.infrastructure.db.preference_repository import SqlAlchemyPreferenceRepository
from style_api.infrastructure.db.session import create_session_factory, dispose_session_factory
from style_api.infrastructure.db.user_repository import SqlAlchemyUserRepository
from style_api.infrastructure.http.auth_guard import AccessGuard
from style_api.infrastructure.http.auth_router import build_auth_router
from style_api.infrastructure.http.combination_router import build_combination_router
from style_api.infrastructure.http.error_handlers import install_error_handlers
from style_api.infrastructure.http.preference_router import build_preference_router
from style_api.infrastructure.http.user_router import build_user_router
from style_api.infrastructure.logging import configure_logging
from style_api.infrastructure.security.password_hasher import BcryptPasswordHasher
from style_api.infrastructure.security.token_service import JwtTokenService
from style_api.infrastructure.storage.supabase_storage import SupabaseStorageClient

API_HOST = "0.0.0.0"
API_PORT = 3000
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
WELCOME_MESSAGE = "Welcome to the style API"
_CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
_CORS_HEADERS = ["Content-Type", "Authorization", "Accept"]
logger = logging.getLogger(__name__)


def build_storage_client(settings: Settings) -> SupabaseStorageClient:
    """Build the Supabase Storage adapter from runtime settings."""

    return SupabaseStorageClient(
        project_url=str(settings.supabase_url),
        service_key=settings.supabase_key,
        timeout_seconds=settings.storage_timeout_seconds,
    )


def create_app(
    *,
    database_url: str | None = None,
    storage: ObjectStoragePort | None = None,
    token_service: SessionTokenPort | None = None,
    password_hasher: PasswordHasherPort | None = None,
    max_upload_bytes: int | None = None,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create FastAPI app exposing auth, profile, preference and combination routes."""

    settings = None
    if database_url is None or storage is None or token_service is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        if database_url is None:
            database_url = settings.database_url
        if storage is None:
            storage = build_storage_client(settings)
        if token_service is None:
            token_service = JwtTokenService(
                secret=settings.jwt_secret,
                token_ttl=settings.jwt_expires_in,
            )

    if password_hasher is None:
        password_hasher = BcryptPasswordHasher(
            rounds=settings.bcrypt_rounds if settings is not None else 10
        )
    if max_upload_bytes is None:
        max_upload_bytes = (
            settings.max_upload_bytes if settings is not None else DEFAULT_MAX_UPLOAD_BYTES
        )
    if cors_origins is None:
        cors_origins = settings.cors_origins() if settings is not None else ["*"]

    assert database_url is not None
    assert storage is not None
    assert token_service is not None

    session_factory = create_session_factory(database_url)
    users = SqlAlchemyUserRepository(session_factory)
    combinations = SqlAlchemyCombinationRepository(session_factory)
    preferences = SqlAlchemyPreferenceRepository(session_factory)

    auth_guard = AccessGuard(token_service=token_service, user_repository=users)
    image_service = ImageLifecycleService(
        combinations=combinations,
        users=users,
        storage=storage,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("api_starting")
        yield
        await dispose_session_factory(session_factory)
        logger.info("api_stopped")

    app = FastAPI(lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=_CORS_METHODS,
        allow_headers=_CORS_HEADERS,
    )
    install_error_handlers(app)

    app.include_router(
        build_auth_router(
            auth_service=AuthService(
                users=users,
                password_hasher=password_hasher,
                token_service=token_service,
            ),
            auth_guard=auth_guard,
        )
    )
    app.include_router(
        build_user_router(
            profile_service=ProfileService(users=users, preferences=preferences),
            image_service=image_service,
            auth_guard=auth_guard,
            max_upload_bytes=max_upload_bytes,
        )
    )
    app.include_router(
        build_preference_router(
            preference_service=PreferenceService(preferences=preferences),
            auth_guard=auth_guard,
        )
    )
    app.include_router(
        build_combination_router(
            combination_service=CombinationService(combinations=combinations),
            image_service=image_service,
            auth_guard=auth_guard,
            max_upload_bytes=max_upload_bytes,
        )
    )

    @app.get("/", response_model=MessageResponse)
    async def welcome() -> MessageResponse:
        return MessageResponse(message=WELCOME_MESSAGE)

    return app


def run_asgi_server(*, host: str = API_HOST, port: int = API_PORT) -> None:
    """Run the API as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run the API runtime process on the configured port."""

    run_asgi_server(port=load_settings().port)


if __name__ == "__main__":
    main()
