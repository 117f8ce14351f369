"""Heat-scoring schemas (configuration, results, API payloads)."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from venue_crm.schemas.common import HeatLevel


class ScoringConfig(BaseModel):
    """Tuning knobs for advanced heat scoring.

    Every modifier can be switched off on its own.  Windows and half-life
    are expressed in days.
    """

    time_decay_enabled: bool = True
    time_decay_half_life: float = Field(30, gt=0)
    recency_boost_enabled: bool = True
    recency_boost_window: float = Field(7, ge=0)
    recency_boost_multiplier: float = Field(1.5, gt=0)
    frequency_boost_enabled: bool = True
    frequency_boost_threshold: int = Field(3, ge=1)
    frequency_boost_multiplier: float = Field(1.3, gt=0)


class HeatScoreResult(BaseModel):
    score: float = Field(..., ge=0)
    heat_level: HeatLevel


class HeatScoreRequest(BaseModel):
    """Request body for POST /api/v1/contacts/{contact_id}/heat-score."""

    use_advanced_scoring: bool = False
    scoring_config: Optional[ScoringConfig] = None


class HeatScoreCalculation(BaseModel):
    """Outcome of a persisted heat-score recalculation."""

    contact_id: UUID
    score: float = Field(..., ge=0)
    heat_level: HeatLevel
    interaction_count: int
    scoring_method: str
