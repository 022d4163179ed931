"""FastAPI router for stored style preferences."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header

from style_api.application.dto.preference_models import (
    PreferenceEnvelope,
    PreferenceRequest,
    PreferenceResponse,
    preferences_payload,
)
from style_api.application.services.preference_service import PreferenceService
from style_api.infrastructure.http.auth_guard import AccessGuard


def build_preference_router(
    *,
    preference_service: PreferenceService,
    auth_guard: AccessGuard,
) -> APIRouter:
    """Build router exposing preference get, save (upsert) and partial update."""

    router = APIRouter(prefix="/api/preferences", tags=["preferences"])

    @router.get("", response_model=PreferenceEnvelope)
    async def get_preferences(
        authorization: Annotated[str | None, Header()] = None,
    ) -> PreferenceEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        stored = await preference_service.get_preferences(user_id=user.user_id)
        return PreferenceEnvelope(preferences=preferences_payload(stored))

    @router.post("", response_model=PreferenceEnvelope)
    async def save_preferences(
        payload: PreferenceRequest,
        authorization: Annotated[str | None, Header()] = None,
    ) -> PreferenceEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        saved = await preference_service.save_preferences(
            user_id=user.user_id,
            values=payload.to_values(),
        )
        return PreferenceEnvelope(
            message="preferences saved",
            preferences=PreferenceResponse.from_record(saved),
        )

    @router.put("", response_model=PreferenceEnvelope)
    async def update_preferences(
        payload: PreferenceRequest,
        authorization: Annotated[str | None, Header()] = None,
    ) -> PreferenceEnvelope:
        user = await auth_guard.require_user(authorization_header=authorization)
        updated = await preference_service.update_preferences(
            user_id=user.user_id,
            values=payload.to_values(),
        )
        return PreferenceEnvelope(
            message="preferences updated",
            preferences=PreferenceResponse.from_record(updated),
        )

    return router
