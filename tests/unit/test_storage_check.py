from __future__ import annotations

import pytest

from apps.storage_check.main import check_storage
from style_api.application.ports.object_storage_port import ObjectStorageError


class FakeStorageClient:
    def __init__(self, *, buckets: list[str], error: Exception | None = None) -> None:
        self.buckets = buckets
        self.error = error

    async def list_buckets(self) -> list[str]:
        if self.error is not None:
            raise self.error
        return self.buckets


@pytest.mark.asyncio
async def test_check_storage_reports_no_missing_buckets_when_both_exist() -> None:
    client = FakeStorageClient(buckets=["clothing-images", "profile-images", "misc"])

    assert await check_storage(client) == []  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_check_storage_lists_missing_image_buckets() -> None:
    client = FakeStorageClient(buckets=["profile-images"])

    assert await check_storage(client) == ["clothing-images"]  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_check_storage_propagates_listing_failure() -> None:
    client = FakeStorageClient(buckets=[], error=ObjectStorageError("list_buckets failed"))

    with pytest.raises(ObjectStorageError):
        await check_storage(client)  # type: ignore[arg-type]
