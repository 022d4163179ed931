"""Multipart upload helpers producing size-checked image payloads."""

from __future__ import annotations

from fastapi import UploadFile

from style_api.domain.errors import InvalidInputError
from style_api.domain.images import ImageUpload

_CHUNK_SIZE = 64 * 1024


async def read_image_upload(upload: UploadFile | None, *, max_bytes: int) -> ImageUpload | None:
    """Read one uploaded file into memory, rejecting payloads over `max_bytes`."""

    if upload is None:
        return None

    chunks: list[bytes] = []
    total = 0
    while chunk := await upload.read(_CHUNK_SIZE):
        total += len(chunk)
        if total > max_bytes:
            raise InvalidInputError(f"file too large; maximum allowed size is {max_bytes} bytes")
        chunks.append(chunk)

    return ImageUpload(
        body=b"".join(chunks),
        content_type=upload.content_type or "application/octet-stream",
        filename=upload.filename,
    )
