"""Profile read/update use-cases for the authenticated user."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from style_api.application.ports.preference_repository_port import (
    PreferenceRecord,
    PreferenceRepositoryPort,
)
from style_api.application.ports.user_repository_port import (
    DuplicateUserError,
    PublicUser,
    UserRepositoryPort,
    UserUpdateInput,
)
from style_api.domain.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

_USERNAME_IN_USE = "username already in use"


@dataclass(frozen=True)
class Profile:
    """User view plus stored preferences, if any."""

    user: PublicUser
    preferences: PreferenceRecord | None


class ProfileService:
    """Expose profile lookup and partial profile updates."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        preferences: PreferenceRepositoryPort,
    ) -> None:
        self._users = users
        self._preferences = preferences

    async def get_profile(self, *, user: PublicUser) -> Profile:
        stored = await self._preferences.get_by_user(user_id=user.user_id)
        return Profile(user=user, preferences=stored)

    async def update_profile(
        self,
        *,
        user: PublicUser,
        name: str | None = None,
        username: str | None = None,
        bio: str | None = None,
        bio_supplied: bool = False,
    ) -> PublicUser:
        """Apply name/username/bio changes; blank name or username is ignored."""

        new_name = name.strip() if name and name.strip() else None
        new_username = username.strip() if username and username.strip() else None

        if new_username is not None and new_username != user.username:
            if await self._users.get_by_username(username=new_username) is not None:
                raise ConflictError(_USERNAME_IN_USE)

        payload = (
            UserUpdateInput(name=new_name, username=new_username, bio=bio)
            if bio_supplied
            else UserUpdateInput(name=new_name, username=new_username)
        )
        try:
            updated = await self._users.update_user(user_id=user.user_id, payload=payload)
        except DuplicateUserError as error:
            raise ConflictError(_USERNAME_IN_USE) from error

        if updated is None:
            raise NotFoundError("user not found")
        logger.info("profile_updated user_id=%s", user.user_id)
        return updated.to_public()
