"""FastAPI router for registration, login and session verification."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header

from style_api.application.dto.user_models import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    SessionResponse,
    UserResponse,
)
from style_api.application.services.auth_service import AuthService, AuthSession
from style_api.infrastructure.http.auth_guard import AccessGuard


def build_auth_router(*, auth_service: AuthService, auth_guard: AccessGuard) -> APIRouter:
    """Build router exposing public auth endpoints and the session check."""

    router = APIRouter(prefix="/api/auth", tags=["auth"])

    @router.post("/register", response_model=AuthResponse, status_code=201)
    async def register(payload: RegisterRequest) -> AuthResponse:
        session = await auth_service.register(
            name=payload.name,
            email=payload.email,
            username=payload.username,
            password=payload.password,
        )
        return _auth_response(message="user registered", session=session)

    @router.post("/login", response_model=AuthResponse)
    async def login(payload: LoginRequest) -> AuthResponse:
        session = await auth_service.login(email=payload.email, password=payload.password)
        return _auth_response(message="login successful", session=session)

    @router.get("/verify", response_model=SessionResponse)
    async def verify(
        authorization: Annotated[str | None, Header()] = None,
    ) -> SessionResponse:
        user = await auth_guard.require_user(authorization_header=authorization)
        return SessionResponse(message="token is valid", user=UserResponse.from_user(user))

    return router


def _auth_response(*, message: str, session: AuthSession) -> AuthResponse:
    return AuthResponse(
        message=message,
        user=UserResponse.from_user(session.user),
        token=session.token,
        expires_at=session.expires_at,
    )
