"""Keep database image references in step with objects held in storage.

Ordering is the only consistency mechanism: rows are written only after their
objects exist, and objects are removed before the rows that reference them. A
crash between the two steps leaves at worst an orphaned storage object.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from style_api.application.ports.combination_repository_port import (
    CombinationCreateInput,
    CombinationImagesUpdate,
    CombinationRecord,
    CombinationRepositoryPort,
)
from style_api.application.ports.object_storage_port import ObjectStorageError, ObjectStoragePort
from style_api.application.ports.user_repository_port import (
    PublicUser,
    UserRepositoryPort,
    UserUpdateInput,
)
from style_api.application.services.combination_service import require_owned_combination
from style_api.domain.errors import InternalError, InvalidInputError, NotFoundError
from style_api.domain.images import (
    ImageBucket,
    ImageSlot,
    ImageUpload,
    build_object_key,
    object_key_from_url,
    validate_image_upload,
)

logger = logging.getLogger(__name__)

DEFAULT_COMBINATION_NAME = "My combination"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class ImageLifecycleService:
    """Create, replace and delete image-backed records."""

    def __init__(
        self,
        *,
        combinations: CombinationRepositoryPort,
        users: UserRepositoryPort,
        storage: ObjectStoragePort,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._combinations = combinations
        self._users = users
        self._storage = storage
        self._now = now

    async def create_combination(
        self,
        *,
        owner_id: UUID,
        upper: ImageUpload | None,
        lower: ImageUpload | None,
        name: str | None = None,
        description: str | None = None,
    ) -> CombinationRecord:
        """Upload both garment images, then persist the combination row."""

        if upper is None or lower is None:
            raise InvalidInputError("upper and lower images are required")
        upper_extension = validate_image_upload(upper)
        lower_extension = validate_image_upload(lower)

        upper_url = await self._upload(
            bucket=ImageBucket.CLOTHING,
            owner_id=owner_id,
            upload=upper,
            extension=upper_extension,
            slot=ImageSlot.UPPER,
        )
        try:
            lower_url = await self._upload(
                bucket=ImageBucket.CLOTHING,
                owner_id=owner_id,
                upload=lower,
                extension=lower_extension,
                slot=ImageSlot.LOWER,
            )
        except InternalError:
            logger.warning(
                "combination_create_orphaned_object owner_id=%s url=%s",
                owner_id,
                upper_url,
            )
            raise

        try:
            combination = await self._combinations.create_combination(
                CombinationCreateInput(
                    user_id=owner_id,
                    name=(name or "").strip() or DEFAULT_COMBINATION_NAME,
                    description=description or "",
                    upper_image=upper_url,
                    lower_image=lower_url,
                )
            )
        except Exception as error:  # noqa: BLE001
            logger.exception(
                "combination_create_row_failed owner_id=%s orphaned_urls=%s,%s",
                owner_id,
                upper_url,
                lower_url,
            )
            raise InternalError("failed to create combination") from error

        logger.info(
            "combination_created combination_id=%s owner_id=%s",
            combination.combination_id,
            owner_id,
        )
        return combination

    async def replace_combination_images(
        self,
        *,
        owner_id: UUID,
        combination_id: UUID,
        upper: ImageUpload | None = None,
        lower: ImageUpload | None = None,
    ) -> CombinationRecord:
        """Swap the stored object behind each supplied slot and relink the row once."""

        combination = await require_owned_combination(
            self._combinations,
            owner_id=owner_id,
            combination_id=combination_id,
        )
        requested = [
            (slot, upload, validate_image_upload(upload))
            for slot, upload in ((ImageSlot.UPPER, upper), (ImageSlot.LOWER, lower))
            if upload is not None
        ]
        if not requested:
            raise InvalidInputError("at least one image is required")

        staged: dict[ImageSlot, str] = {}
        for slot, upload, extension in requested:
            current_url = (
                combination.upper_image if slot is ImageSlot.UPPER else combination.lower_image
            )
            try:
                await self._delete(bucket=ImageBucket.CLOTHING, url=current_url)
                staged[slot] = await self._upload(
                    bucket=ImageBucket.CLOTHING,
                    owner_id=owner_id,
                    upload=upload,
                    extension=extension,
                    slot=slot,
                )
            except InternalError:
                logger.warning(
                    "combination_replace_slot_failed combination_id=%s slot=%s completed=%s",
                    combination_id,
                    slot.value,
                    ",".join(done.value for done in staged),
                )
                if staged:
                    # Completed slots already lost their old object; link the new one.
                    await self._combinations.update_images(
                        combination_id=combination_id,
                        payload=_images_update(staged),
                    )
                raise

        updated = await self._combinations.update_images(
            combination_id=combination_id,
            payload=_images_update(staged),
        )
        if updated is None:
            raise NotFoundError("combination not found")
        logger.info(
            "combination_images_replaced combination_id=%s slots=%s",
            combination_id,
            ",".join(slot.value for slot in staged),
        )
        return updated

    async def delete_combination(self, *, owner_id: UUID, combination_id: UUID) -> None:
        """Remove both stored objects first, then the row that referenced them."""

        combination = await require_owned_combination(
            self._combinations,
            owner_id=owner_id,
            combination_id=combination_id,
        )
        await self._delete(bucket=ImageBucket.CLOTHING, url=combination.upper_image)
        await self._delete(bucket=ImageBucket.CLOTHING, url=combination.lower_image)
        await self._combinations.delete_combination(combination_id=combination_id)
        logger.info("combination_deleted combination_id=%s owner_id=%s", combination_id, owner_id)

    async def upload_profile_image(
        self,
        *,
        user: PublicUser,
        image: ImageUpload | None,
    ) -> PublicUser:
        """Store a new profile image, link it, then retire the previous object."""

        if image is None:
            raise InvalidInputError("no image was uploaded")
        extension = validate_image_upload(image)

        url = await self._upload(
            bucket=ImageBucket.PROFILE,
            owner_id=user.user_id,
            upload=image,
            extension=extension,
        )
        updated = await self._users.update_user(
            user_id=user.user_id,
            payload=UserUpdateInput(profile_image=url),
        )
        if updated is None:
            raise NotFoundError("user not found")

        previous_url = user.profile_image
        if previous_url and previous_url != url:
            try:
                await self._delete(bucket=ImageBucket.PROFILE, url=previous_url)
            except InternalError:
                logger.warning(
                    "profile_image_retire_failed user_id=%s url=%s",
                    user.user_id,
                    previous_url,
                )

        logger.info("profile_image_updated user_id=%s", user.user_id)
        return updated.to_public()

    async def _upload(
        self,
        *,
        bucket: ImageBucket,
        owner_id: UUID,
        upload: ImageUpload,
        extension: str,
        slot: ImageSlot | None = None,
    ) -> str:
        key = build_object_key(
            owner_id=owner_id,
            extension=extension,
            uploaded_at=self._now(),
            slot=slot,
        )
        try:
            return await self._storage.put_object(
                bucket=bucket.value,
                key=key,
                body=upload.body,
                content_type=upload.content_type,
            )
        except ObjectStorageError as error:
            logger.warning(
                "image_upload_failed bucket=%s key=%s error=%s",
                bucket.value,
                key,
                error,
            )
            raise InternalError("failed to upload image") from error

    async def _delete(self, *, bucket: ImageBucket, url: str) -> None:
        try:
            key = object_key_from_url(url)
            await self._storage.delete_object(bucket=bucket.value, key=key)
        except (ObjectStorageError, ValueError) as error:
            logger.warning(
                "image_delete_failed bucket=%s url=%s error=%s",
                bucket.value,
                url,
                error,
            )
            raise InternalError("failed to delete image") from error


def _images_update(staged: dict[ImageSlot, str]) -> CombinationImagesUpdate:
    return CombinationImagesUpdate(
        upper_image=staged.get(ImageSlot.UPPER),
        lower_image=staged.get(ImageSlot.LOWER),
    )
