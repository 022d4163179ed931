"""Style preference use-cases."""

from __future__ import annotations

from uuid import UUID

from style_api.application.ports.preference_repository_port import (
    PreferenceRecord,
    PreferenceRepositoryPort,
    PreferenceValues,
)
from style_api.domain.errors import NotFoundError


class PreferenceService:
    """Read, upsert and partially update one user's preferences."""

    def __init__(self, *, preferences: PreferenceRepositoryPort) -> None:
        self._preferences = preferences

    async def get_preferences(self, *, user_id: UUID) -> PreferenceRecord | None:
        return await self._preferences.get_by_user(user_id=user_id)

    async def save_preferences(
        self,
        *,
        user_id: UUID,
        values: PreferenceValues,
    ) -> PreferenceRecord:
        """Create the preference row or write supplied fields onto the existing one."""

        updated = await self._preferences.update_preferences(user_id=user_id, values=values)
        if updated is not None:
            return updated
        return await self._preferences.create_preferences(user_id=user_id, values=values)

    async def update_preferences(
        self,
        *,
        user_id: UUID,
        values: PreferenceValues,
    ) -> PreferenceRecord:
        """Write supplied fields; the row must already exist."""

        updated = await self._preferences.update_preferences(user_id=user_id, values=values)
        if updated is None:
            raise NotFoundError("preferences not found")
        return updated
