"""Port for binary object storage used by image lifecycle operations."""

from __future__ import annotations

from typing import Protocol


class ObjectStorageError(RuntimeError):
    """Raised for normalized object storage failures."""


class ObjectStoragePort(Protocol):
    """Object storage contract addressed by bucket name and object key."""

    async def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
    ) -> str:
        """Store one object and return its public URL."""

    async def delete_object(self, *, bucket: str, key: str) -> None:
        """Remove one object; raise `ObjectStorageError` on failure."""
