"""Contact-specific Pydantic schemas (create, search, status override)."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from venue_crm.schemas.common import (
    ContactStatus,
    HeatLevel,
    LeadSource,
    SuccessResponse,
)


class ContactCreate(BaseModel):
    """Request body for POST /api/v1/contacts."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=40)
    company: Optional[str] = Field(None, max_length=200)
    lead_source: LeadSource = LeadSource.OTHER
    notes: Optional[str] = None


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    contact_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    lead_source: str
    lead_heat: HeatLevel
    lead_heat_score: float
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_interaction_at: Optional[datetime] = None


class ContactListResponse(BaseModel):
    contacts: List[ContactOut]
    total: int
    has_more: bool


class StatusOverrideRequest(BaseModel):
    """Request body for PUT /api/v1/contacts/{contact_id}/status."""

    status: ContactStatus
    reason: Optional[str] = None


class StatusOverrideResponse(SuccessResponse):
    contact_id: UUID
    from_stage: str
    to_stage: str
