from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from venue_crm.core.config import settings
from venue_crm.core.rate_limit import limiter
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)
from venue_crm.schemas.common import UserRole
from venue_crm.schemas.interaction import (
    InteractionCreate,
    InteractionCreateResponse,
    InteractionListResponse,
    InteractionOut,
)
from venue_crm.services.interaction_service import InteractionService
from venue_crm.api.deps import (
    get_contact_repo,
    get_interaction_repo,
    get_interaction_service,
    get_rule_repo,
    require_minimum_role,
)

router = APIRouter(tags=["Interactions"])


@router.post(
    "/contacts/{contact_id}/interactions",
    response_model=InteractionCreateResponse,
    status_code=201,
)
@limiter.limit(settings.INTERACTION_RATE_LIMIT)
async def create_interaction(
    request: Request,
    contact_id: UUID,
    body: InteractionCreate,
    actor_role: str = Depends(require_minimum_role(UserRole.STAFF)),
    service: InteractionService = Depends(get_interaction_service),
    contact_repo: ContactRepository = Depends(get_contact_repo),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
    rule_repo: ProgressionRuleRepository = Depends(get_rule_repo),
) -> InteractionCreateResponse:
    """Record an interaction and recalculate the contact's heat.

    Rate-limited per IP since webhook bridges post here directly.
    """
    result = await service.create_interaction(
        contact_id,
        body,
        contact_repo=contact_repo,
        interaction_repo=interaction_repo,
        rule_repo=rule_repo,
        actor_role=actor_role,
    )
    return InteractionCreateResponse(**result)


@router.get(
    "/contacts/{contact_id}/interactions", response_model=InteractionListResponse
)
async def list_interactions(
    contact_id: UUID,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    _role: str = Depends(require_minimum_role(UserRole.STAFF)),
    service: InteractionService = Depends(get_interaction_service),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
) -> InteractionListResponse:
    data = await service.list_interactions(
        contact_id, interaction_repo, limit=limit, offset=offset
    )
    return InteractionListResponse(
        interactions=[InteractionOut.model_validate(i) for i in data["interactions"]],
        total=data["total"],
        has_more=data["has_more"],
    )


@router.delete("/interactions/{interaction_id}")
async def delete_interaction(
    interaction_id: UUID,
    _role: str = Depends(require_minimum_role(UserRole.SALES)),
    service: InteractionService = Depends(get_interaction_service),
    contact_repo: ContactRepository = Depends(get_contact_repo),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
) -> dict:
    return await service.delete_interaction(
        interaction_id,
        contact_repo=contact_repo,
        interaction_repo=interaction_repo,
    )
