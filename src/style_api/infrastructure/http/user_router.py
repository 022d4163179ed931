"""FastAPI router for the authenticated user's profile."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, File, Header, UploadFile

from style_api.application.dto.preference_models import ProfileResponse, preferences_payload
from style_api.application.dto.user_models import (
    ProfileUpdateRequest,
    UserEnvelope,
    UserResponse,
)
from style_api.application.services.image_lifecycle_service import ImageLifecycleService
from style_api.application.services.profile_service import ProfileService
from style_api.infrastructure.http.auth_guard import AccessGuard
from style_api.infrastructure.http.uploads import read_image_upload


def build_user_router(
    *,
    profile_service: ProfileService,
    image_service: ImageLifecycleService,
    auth_guard: AccessGuard,
    max_upload_bytes: int,
) -> APIRouter:
    """Build router exposing profile read, update and image upload."""

    router = APIRouter(prefix="/api/users", tags=["users"])

    @router.get("/me", response_model=ProfileResponse)
    async def get_current_user(
        authorization: Annotated[str | None, Header()] = None,
    ) -> ProfileResponse:
        user = await auth_guard.require_user(authorization_header=authorization)
        profile = await profile_service.get_profile(user=user)
        return ProfileResponse(
            user=UserResponse.from_user(profile.user),
            preferences=preferences_payload(profile.preferences),
        )

    @router.put("/me", response_model=UserEnvelope)
    async def update_current_user(
        payload: ProfileUpdateRequest,
        authorization: Annotated[str | None, Header()] = None,
    ) -> UserEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        updated = await profile_service.update_profile(
            user=user,
            name=payload.name,
            username=payload.username,
            bio=payload.bio,
            bio_supplied="bio" in payload.model_fields_set,
        )
        return UserEnvelope(message="profile updated", user=UserResponse.from_user(updated))

    @router.post("/me/profile-image", response_model=UserEnvelope)
    async def upload_profile_image(
        image: Annotated[UploadFile | None, File()] = None,
        authorization: Annotated[str | None, Header()] = None,
    ) -> UserEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        upload = await read_image_upload(image, max_bytes=max_upload_bytes)
        updated = await image_service.upload_profile_image(user=user, image=upload)
        return UserEnvelope(message="profile image updated", user=UserResponse.from_user(updated))

    return router
