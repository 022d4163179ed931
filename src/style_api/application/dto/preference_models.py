"""Pydantic models for style preference HTTP contracts."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from style_api.application.dto.user_models import StrictModel, UserResponse
from style_api.application.ports.preference_repository_port import (
    PreferenceRecord,
    PreferenceValues,
)


class PreferenceRequest(StrictModel):
    """Enumerated preference fields; unknown keys are rejected."""

    gender: str | None = None
    body_type: str | None = None
    body_shape: str | None = None
    main_style: str | None = None
    frequent_piece: str | None = None
    preferred_color: str | None = None
    style_to_avoid: str | None = None
    common_occasion: str | None = None

    def to_values(self) -> PreferenceValues:
        return PreferenceValues(**self.model_dump(exclude_unset=True))


class PreferenceResponse(StrictModel):
    """Stored preference row."""

    id: UUID
    user_id: UUID
    gender: str | None = None
    body_type: str | None = None
    body_shape: str | None = None
    main_style: str | None = None
    frequent_piece: str | None = None
    preferred_color: str | None = None
    style_to_avoid: str | None = None
    common_occasion: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: PreferenceRecord) -> PreferenceResponse:
        values = record.values
        return cls(
            id=record.preference_id,
            user_id=record.user_id,
            gender=values.gender,
            body_type=values.body_type,
            body_shape=values.body_shape,
            main_style=values.main_style,
            frequent_piece=values.frequent_piece,
            preferred_color=values.preferred_color,
            style_to_avoid=values.style_to_avoid,
            common_occasion=values.common_occasion,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


def preferences_payload(record: PreferenceRecord | None) -> PreferenceResponse | dict[str, str]:
    """Serialize stored preferences, or an empty object when none exist."""

    if record is None:
        return {}
    return PreferenceResponse.from_record(record)


class PreferenceEnvelope(StrictModel):
    message: str | None = None
    preferences: PreferenceResponse | dict[str, str]


class ProfileResponse(StrictModel):
    """Current user plus stored preferences."""

    user: UserResponse
    preferences: PreferenceResponse | dict[str, str]
