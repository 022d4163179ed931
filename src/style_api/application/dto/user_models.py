"""Pydantic models for auth and profile HTTP contracts."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from style_api.application.ports.user_repository_port import PublicUser
from style_api.domain.auth.credentials import (
    MIN_PASSWORD_LENGTH,
    is_valid_email,
    is_valid_password,
    is_valid_username,
)


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class MessageResponse(StrictModel):
    message: str


class UserResponse(StrictModel):
    """Public user fields exposed over HTTP."""

    id: UUID
    email: str
    username: str
    name: str
    bio: str | None = None
    profile_image: str | None = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: PublicUser) -> UserResponse:
        return cls(
            id=user.user_id,
            email=user.email,
            username=user.username,
            name=user.name,
            bio=user.bio,
            profile_image=user.profile_image,
            created_at=user.created_at,
        )


class RegisterRequest(StrictModel):
    """HTTP request model for account registration."""

    name: str
    email: str
    username: str
    password: str

    @model_validator(mode="after")
    def _validate_formats(self) -> RegisterRequest:
        """Check shapes of non-blank fields; blank ones are rejected by the service."""

        if self.email.strip() and not is_valid_email(self.email.strip()):
            raise ValueError("invalid email address")
        if self.username.strip() and not is_valid_username(self.username.strip()):
            raise ValueError(
                "username must have at least 3 characters: letters, numbers, dots or underscores"
            )
        if self.password.strip() and not is_valid_password(self.password):
            raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters")
        return self


class LoginRequest(StrictModel):
    """HTTP request model for credential login."""

    email: str
    password: str


class AuthResponse(StrictModel):
    """HTTP response model for register and login."""

    message: str
    user: UserResponse
    token: str
    expires_at: datetime


class SessionResponse(StrictModel):
    """HTTP response model for session verification."""

    message: str
    user: UserResponse


class ProfileUpdateRequest(StrictModel):
    """HTTP request model for profile updates; omitted fields stay unchanged."""

    name: str | None = None
    username: str | None = None
    bio: str | None = None


class UserEnvelope(StrictModel):
    message: str | None = None
    user: UserResponse
