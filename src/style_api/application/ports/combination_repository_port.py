"""Port for combination persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class CombinationRecord:
    """Combination persistence model."""

    combination_id: UUID
    user_id: UUID
    name: str
    description: str
    upper_image: str
    lower_image: str
    created_at: datetime


@dataclass(frozen=True)
class CombinationCreateInput:
    """Input payload for inserting one combination row."""

    user_id: UUID
    name: str
    description: str
    upper_image: str
    lower_image: str


@dataclass(frozen=True)
class CombinationImagesUpdate:
    """New image references for a combination; `None` keeps the current one."""

    upper_image: str | None = None
    lower_image: str | None = None

    def is_empty(self) -> bool:
        return self.upper_image is None and self.lower_image is None


class CombinationRepositoryPort(Protocol):
    """Combination repository contract."""

    async def list_by_user(self, *, user_id: UUID) -> list[CombinationRecord]:
        """Return combinations owned by one user, newest first."""

    async def get_by_id(self, *, combination_id: UUID) -> CombinationRecord | None:
        """Return combination by id or None."""

    async def create_combination(self, payload: CombinationCreateInput) -> CombinationRecord:
        """Insert one combination row and return it."""

    async def update_images(
        self,
        *,
        combination_id: UUID,
        payload: CombinationImagesUpdate,
    ) -> CombinationRecord | None:
        """Write new image references; None when the row does not exist."""

    async def delete_combination(self, *, combination_id: UUID) -> bool:
        """Delete one row and return whether it existed."""
