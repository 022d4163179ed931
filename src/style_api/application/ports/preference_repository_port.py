"""Port for per-user style preference persistence."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class PreferenceValues:
    """Enumerated updatable preference fields; `None` means not supplied."""

    gender: str | None = None
    body_type: str | None = None
    body_shape: str | None = None
    main_style: str | None = None
    frequent_piece: str | None = None
    preferred_color: str | None = None
    style_to_avoid: str | None = None
    common_occasion: str | None = None

    def supplied(self) -> dict[str, str]:
        """Return only the fields that carry a value."""

        return {
            field.name: value
            for field in fields(self)
            if (value := getattr(self, field.name)) is not None
        }


PREFERENCE_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(PreferenceValues))


@dataclass(frozen=True)
class PreferenceRecord:
    """Preference persistence model."""

    preference_id: UUID
    user_id: UUID
    values: PreferenceValues
    created_at: datetime
    updated_at: datetime


class PreferenceRepositoryPort(Protocol):
    """Preference repository contract."""

    async def get_by_user(self, *, user_id: UUID) -> PreferenceRecord | None:
        """Return the preference row of one user or None."""

    async def create_preferences(
        self,
        *,
        user_id: UUID,
        values: PreferenceValues,
    ) -> PreferenceRecord:
        """Insert the preference row of one user, merging into a row created meanwhile."""

    async def update_preferences(
        self,
        *,
        user_id: UUID,
        values: PreferenceValues,
    ) -> PreferenceRecord | None:
        """Write supplied fields only; None when the user has no row."""
