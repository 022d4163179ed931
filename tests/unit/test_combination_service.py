from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from style_api.application.ports.combination_repository_port import CombinationRecord
from style_api.application.services.combination_service import CombinationService
from style_api.domain.errors import ForbiddenError, NotFoundError

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


class FakeCombinationRepository:
    def __init__(self, rows: list[CombinationRecord]) -> None:
        self.rows = rows

    async def list_by_user(self, *, user_id: UUID) -> list[CombinationRecord]:
        owned = [row for row in self.rows if row.user_id == user_id]
        return sorted(owned, key=lambda row: row.created_at, reverse=True)

    async def get_by_id(self, *, combination_id: UUID) -> CombinationRecord | None:
        return next((row for row in self.rows if row.combination_id == combination_id), None)


def _combination(owner_id: UUID, *, name: str, age: timedelta) -> CombinationRecord:
    return CombinationRecord(
        combination_id=uuid4(),
        user_id=owner_id,
        name=name,
        description="",
        upper_image="https://storage.example/upper.png",
        lower_image="https://storage.example/lower.png",
        created_at=NOW - age,
    )


@pytest.mark.asyncio
async def test_list_combinations_returns_only_callers_rows_newest_first() -> None:
    owner_id = uuid4()
    older = _combination(owner_id, name="older", age=timedelta(days=2))
    newer = _combination(owner_id, name="newer", age=timedelta(hours=1))
    foreign = _combination(uuid4(), name="foreign", age=timedelta(0))
    service = CombinationService(combinations=FakeCombinationRepository([older, foreign, newer]))

    listed = await service.list_combinations(owner_id=owner_id)

    assert [row.name for row in listed] == ["newer", "older"]


@pytest.mark.asyncio
async def test_get_combination_returns_owned_row() -> None:
    owner_id = uuid4()
    row = _combination(owner_id, name="mine", age=timedelta(0))
    service = CombinationService(combinations=FakeCombinationRepository([row]))

    fetched = await service.get_combination(owner_id=owner_id, combination_id=row.combination_id)

    assert fetched == row


@pytest.mark.asyncio
async def test_get_foreign_combination_is_forbidden() -> None:
    row = _combination(uuid4(), name="theirs", age=timedelta(0))
    service = CombinationService(combinations=FakeCombinationRepository([row]))

    with pytest.raises(ForbiddenError) as error:
        await service.get_combination(owner_id=uuid4(), combination_id=row.combination_id)

    assert error.value.message == "access denied"


@pytest.mark.asyncio
async def test_get_unknown_combination_is_not_found() -> None:
    service = CombinationService(combinations=FakeCombinationRepository([]))

    with pytest.raises(NotFoundError) as error:
        await service.get_combination(owner_id=uuid4(), combination_id=uuid4())

    assert error.value.message == "combination not found"
