"""Image upload rules: allowed formats, storage buckets and object key naming."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from urllib.parse import unquote, urlparse
from uuid import UUID

from style_api.domain.errors import InvalidInputError

CONTENT_TYPE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})
UNSUPPORTED_FORMAT_MESSAGE = (
    "unsupported file format; only JPEG, PNG, GIF and WEBP images are allowed"
)


class ImageBucket(StrEnum):
    """Object storage buckets holding user images."""

    PROFILE = "profile-images"
    CLOTHING = "clothing-images"


class ImageSlot(StrEnum):
    """Garment position of a combination image."""

    UPPER = "upper"
    LOWER = "lower"


@dataclass(frozen=True)
class ImageUpload:
    """One image payload as received from the transport layer."""

    body: bytes
    content_type: str
    filename: str | None = None


def validate_image_upload(upload: ImageUpload) -> str:
    """Check one upload against the allow-list and return its storage extension."""

    content_type = upload.content_type.split(";", 1)[0].strip().lower()
    extension = CONTENT_TYPE_EXTENSIONS.get(content_type)
    if extension is None:
        raise InvalidInputError(UNSUPPORTED_FORMAT_MESSAGE)

    if upload.filename and "." in upload.filename:
        declared = upload.filename.rsplit(".", 1)[1].strip().lower()
        if declared not in ALLOWED_EXTENSIONS:
            raise InvalidInputError(UNSUPPORTED_FORMAT_MESSAGE)

    if not upload.body:
        raise InvalidInputError("image file is empty")
    return extension


def build_object_key(
    *,
    owner_id: UUID,
    extension: str,
    uploaded_at: datetime,
    slot: ImageSlot | None = None,
) -> str:
    """Build a collision-resistant object key scoped by owner, slot and time."""

    millis = int(uploaded_at.timestamp() * 1000)
    parts = [owner_id.hex]
    if slot is not None:
        parts.append(slot.value)
    parts.extend([str(millis), secrets.token_hex(4)])
    return f"{'-'.join(parts)}.{extension}"


def object_key_from_url(url: str) -> str:
    """Extract the object key (last path segment) from a public object URL."""

    path = urlparse(url).path
    key = unquote(path.rsplit("/", 1)[-1])
    if not key:
        raise ValueError(f"image url has no object key: {url}")
    return key
