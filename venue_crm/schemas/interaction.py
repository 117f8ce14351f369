"""Interaction schemas (ingestion, listing, responses)."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from venue_crm.schemas.common import HeatLevel, InteractionType, SocialPlatform
from venue_crm.schemas.progression import ProgressionResult


class InteractionCreate(BaseModel):
    """Request body for POST /api/v1/contacts/{contact_id}/interactions.

    ``evaluate_progression`` asks the service to run the stage
    progression engine once the heat score has been recalculated.
    """

    type: InteractionType
    platform: Optional[SocialPlatform] = None
    description: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    evaluate_progression: bool = False

    @field_validator("type")
    @classmethod
    def reject_audit_type(cls, value: InteractionType) -> InteractionType:
        """Audit entries are only ever written by the progression engine."""
        if value == InteractionType.STAGE_PROGRESSION:
            raise ValueError(
                "STAGE_PROGRESSION interactions cannot be created directly"
            )
        return value


class InteractionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    interaction_id: UUID
    contact_id: UUID
    type: str
    platform: Optional[str] = None
    description: Optional[str] = None
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata")
    )
    created_at: Optional[datetime] = None
    created_by_role: Optional[str] = None


class InteractionCreateResponse(BaseModel):
    success: bool = True
    interaction_id: UUID
    contact_id: UUID
    lead_heat_score: float
    lead_heat: HeatLevel
    progression: Optional[ProgressionResult] = None


class InteractionListResponse(BaseModel):
    interactions: List[InteractionOut]
    total: int
    has_more: bool
