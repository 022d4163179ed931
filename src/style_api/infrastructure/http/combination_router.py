"""FastAPI router for garment combinations and their images."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Header, UploadFile

from style_api.application.dto.combination_models import (
    CombinationEnvelope,
    CombinationListResponse,
    CombinationResponse,
)
from style_api.application.dto.user_models import MessageResponse
from style_api.application.services.combination_service import CombinationService
from style_api.application.services.image_lifecycle_service import ImageLifecycleService
from style_api.infrastructure.http.auth_guard import AccessGuard
from style_api.infrastructure.http.uploads import read_image_upload


def build_combination_router(
    *,
    combination_service: CombinationService,
    image_service: ImageLifecycleService,
    auth_guard: AccessGuard,
    max_upload_bytes: int,
) -> APIRouter:
    """Build router exposing combination list/get/create/delete/image replacement."""

    router = APIRouter(prefix="/api/combinations", tags=["combinations"])

    @router.get("", response_model=CombinationListResponse)
    async def list_combinations(
        authorization: Annotated[str | None, Header()] = None,
    ) -> CombinationListResponse:
        user = await auth_guard.require_user(authorization_header=authorization)
        records = await combination_service.list_combinations(owner_id=user.user_id)
        return CombinationListResponse(
            combinations=[CombinationResponse.from_record(record) for record in records]
        )

    @router.get("/{combination_id}", response_model=CombinationEnvelope)
    async def get_combination(
        combination_id: UUID,
        authorization: Annotated[str | None, Header()] = None,
    ) -> CombinationEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        record = await combination_service.get_combination(
            owner_id=user.user_id,
            combination_id=combination_id,
        )
        return CombinationEnvelope(combination=CombinationResponse.from_record(record))

    @router.post("", response_model=CombinationEnvelope, status_code=201)
    async def create_combination(
        upper_image: Annotated[UploadFile | None, File(alias="upperImage")] = None,
        lower_image: Annotated[UploadFile | None, File(alias="lowerImage")] = None,
        name: Annotated[str | None, Form()] = None,
        description: Annotated[str | None, Form()] = None,
        authorization: Annotated[str | None, Header()] = None,
    ) -> CombinationEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        record = await image_service.create_combination(
            owner_id=user.user_id,
            upper=await read_image_upload(upper_image, max_bytes=max_upload_bytes),
            lower=await read_image_upload(lower_image, max_bytes=max_upload_bytes),
            name=name,
            description=description,
        )
        return CombinationEnvelope(
            message="combination created",
            combination=CombinationResponse.from_record(record),
        )

    @router.delete("/{combination_id}", response_model=MessageResponse)
    async def delete_combination(
        combination_id: UUID,
        authorization: Annotated[str | None, Header()] = None,
    ) -> MessageResponse:
        user = await auth_guard.require_user(authorization_header=authorization)
        await image_service.delete_combination(
            owner_id=user.user_id,
            combination_id=combination_id,
        )
        return MessageResponse(message="combination deleted")

    @router.post("/{combination_id}/images", response_model=CombinationEnvelope)
    async def replace_combination_images(
        combination_id: UUID,
        upper_image: Annotated[UploadFile | None, File(alias="upperImage")] = None,
        lower_image: Annotated[UploadFile | None, File(alias="lowerImage")] = None,
        authorization: Annotated[str | None, Header()] = None,
    ) -> CombinationEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        record = await image_service.replace_combination_images(
            owner_id=user.user_id,
            combination_id=combination_id,
            upper=await read_image_upload(upper_image, max_bytes=max_upload_bytes),
            lower=await read_image_upload(lower_image, max_bytes=max_upload_bytes),
        )
        return CombinationEnvelope(
            message="combination images updated",
            combination=CombinationResponse.from_record(record),
        )

    return router
