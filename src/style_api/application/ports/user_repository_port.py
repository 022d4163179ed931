"""Port for user persistence operations used by auth and profile services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class DuplicateUserError(ValueError):
    """Raised when the store rejects a write on its email/username uniqueness."""


@dataclass(frozen=True)
class PublicUser:
    """Outward-facing user view; carries no credential material."""

    user_id: UUID
    email: str
    username: str
    name: str
    bio: str | None
    profile_image: str | None
    created_at: datetime


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    email: str
    username: str
    name: str
    password_hash: str
    bio: str | None
    profile_image: str | None
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> PublicUser:
        """Project the record onto its public view."""

        return PublicUser(
            user_id=self.user_id,
            email=self.email,
            username=self.username,
            name=self.name,
            bio=self.bio,
            profile_image=self.profile_image,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class UserCreateInput:
    """Input payload for inserting one user row."""

    name: str
    email: str
    username: str
    password_hash: str


_UNSET = object()


@dataclass(frozen=True)
class UserUpdateInput:
    """Partial user update; `None` leaves a field unchanged.

    `bio` and `profile_image` use an explicit sentinel so they can be cleared.
    """

    name: str | None = None
    username: str | None = None
    bio: object = _UNSET
    profile_image: object = _UNSET

    def values(self) -> dict[str, object]:
        """Return only the columns this update writes."""

        values: dict[str, object] = {}
        if self.name is not None:
            values["name"] = self.name
        if self.username is not None:
            values["username"] = self.username
        if self.bio is not _UNSET:
            values["bio"] = self.bio
        if self.profile_image is not _UNSET:
            values["profile_image"] = self.profile_image
        return values


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

    async def get_by_username(self, *, username: str) -> UserRecord | None:
        """Return user by username or None."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user; raise `DuplicateUserError` on unique collisions."""

    async def update_user(self, *, user_id: UUID, payload: UserUpdateInput) -> UserRecord | None:
        """Apply a partial update; None when the user does not exist."""
