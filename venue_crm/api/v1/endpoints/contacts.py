from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.schemas.common import ContactStatus, HeatLevel, LeadSource, UserRole
from venue_crm.schemas.contact import (
    ContactCreate,
    ContactListResponse,
    ContactOut,
    StatusOverrideRequest,
    StatusOverrideResponse,
)
from venue_crm.schemas.scoring import HeatScoreCalculation, HeatScoreRequest
from venue_crm.services.contact_service import ContactService
from venue_crm.services.heat_scoring import HeatScoringService
from venue_crm.api.deps import (
    get_actor_role,
    get_contact_repo,
    get_contact_service,
    get_interaction_repo,
    get_scoring_service,
    require_minimum_role,
)

router = APIRouter(prefix="/contacts", tags=["Contacts"])


@router.post("", response_model=ContactOut, status_code=201)
async def create_contact(
    body: ContactCreate,
    _role: str = Depends(require_minimum_role(UserRole.STAFF)),
    service: ContactService = Depends(get_contact_service),
    contact_repo: ContactRepository = Depends(get_contact_repo),
) -> ContactOut:
    contact = await service.create_contact(body, contact_repo)
    return ContactOut.model_validate(contact)


@router.get("", response_model=ContactListResponse)
async def search_contacts(
    search: Optional[str] = Query(None, description="Case-insensitive name/email match"),
    lead_source: Optional[LeadSource] = Query(None),
    lead_heat: Optional[HeatLevel] = Query(None),
    status: Optional[ContactStatus] = Query(None),
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _role: str = Depends(require_minimum_role(UserRole.STAFF)),
    service: ContactService = Depends(get_contact_service),
    contact_repo: ContactRepository = Depends(get_contact_repo),
) -> ContactListResponse:
    data = await service.search_contacts(
        contact_repo,
        search=search,
        lead_source=lead_source.value if lead_source else None,
        lead_heat=lead_heat.value if lead_heat else None,
        status=status.value if status else None,
        limit=limit,
        offset=offset,
    )
    return ContactListResponse(
        contacts=[ContactOut.model_validate(c) for c in data["contacts"]],
        total=data["total"],
        has_more=data["has_more"],
    )


@router.get("/{contact_id}", response_model=ContactOut)
async def get_contact(
    contact_id: UUID,
    _role: str = Depends(require_minimum_role(UserRole.STAFF)),
    service: ContactService = Depends(get_contact_service),
    contact_repo: ContactRepository = Depends(get_contact_repo),
) -> ContactOut:
    contact = await service.get_contact(contact_id, contact_repo)
    return ContactOut.model_validate(contact)


@router.put("/{contact_id}/status", response_model=StatusOverrideResponse)
async def override_contact_status(
    contact_id: UUID,
    body: StatusOverrideRequest,
    actor_role: str = Depends(require_minimum_role(UserRole.SALES)),
    service: ContactService = Depends(get_contact_service),
    contact_repo: ContactRepository = Depends(get_contact_repo),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
) -> StatusOverrideResponse:
    """Manually set a contact's stage, bypassing the progression rules."""
    result = await service.override_status(
        contact_id,
        body.status,
        contact_repo=contact_repo,
        interaction_repo=interaction_repo,
        actor_role=actor_role,
        reason=body.reason,
    )
    return StatusOverrideResponse(**result)


@router.post("/{contact_id}/heat-score", response_model=HeatScoreCalculation)
async def calculate_heat_score(
    contact_id: UUID,
    body: HeatScoreRequest,
    _role: str = Depends(require_minimum_role(UserRole.SALES)),
    scoring: HeatScoringService = Depends(get_scoring_service),
    contact_repo: ContactRepository = Depends(get_contact_repo),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
) -> HeatScoreCalculation:
    """Recalculate a contact's heat, optionally with advanced scoring."""
    return await scoring.recalculate(
        contact_id,
        contact_repo,
        interaction_repo,
        use_advanced_scoring=body.use_advanced_scoring,
        config=body.scoring_config,
        commit=True,
    )
