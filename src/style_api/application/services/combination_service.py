"""Combination read use-cases and the shared ownership check."""

from __future__ import annotations

from uuid import UUID

from style_api.application.ports.combination_repository_port import (
    CombinationRecord,
    CombinationRepositoryPort,
)
from style_api.domain.errors import ForbiddenError, NotFoundError


async def require_owned_combination(
    combinations: CombinationRepositoryPort,
    *,
    owner_id: UUID,
    combination_id: UUID,
) -> CombinationRecord:
    """Return the combination when it exists and belongs to the caller.

    Existence is checked before ownership, so a non-owner learns that the id
    exists (403) while an unknown id yields 404.
    """

    combination = await combinations.get_by_id(combination_id=combination_id)
    if combination is None:
        raise NotFoundError("combination not found")
    if combination.user_id != owner_id:
        raise ForbiddenError("access denied")
    return combination


class CombinationService:
    """List and fetch combinations owned by the caller."""

    def __init__(self, *, combinations: CombinationRepositoryPort) -> None:
        self._combinations = combinations

    async def list_combinations(self, *, owner_id: UUID) -> list[CombinationRecord]:
        return await self._combinations.list_by_user(user_id=owner_id)

    async def get_combination(self, *, owner_id: UUID, combination_id: UUID) -> CombinationRecord:
        return await require_owned_combination(
            self._combinations,
            owner_id=owner_id,
            combination_id=combination_id,
        )
