"""Pydantic models for combination HTTP contracts."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from style_api.application.dto.user_models import StrictModel
from style_api.application.ports.combination_repository_port import CombinationRecord


class CombinationResponse(StrictModel):
    id: UUID
    user_id: UUID
    name: str
    description: str
    upper_image: str
    lower_image: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: CombinationRecord) -> CombinationResponse:
        return cls(
            id=record.combination_id,
            user_id=record.user_id,
            name=record.name,
            description=record.description,
            upper_image=record.upper_image,
            lower_image=record.lower_image,
            created_at=record.created_at,
        )


class CombinationEnvelope(StrictModel):
    message: str | None = None
    combination: CombinationResponse


class CombinationListResponse(StrictModel):
    combinations: list[CombinationResponse]
