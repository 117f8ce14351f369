from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from venue_crm.core.cache import CacheService
from venue_crm.core.constants import BULK_REPORT_CACHE_KEY
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)
from venue_crm.schemas.common import UserRole
from venue_crm.schemas.interaction import InteractionOut
from venue_crm.schemas.progression import (
    BulkProgressionReport,
    ProgressionResult,
    ProgressionRuleCreate,
    ProgressionRuleOut,
    SeedRulesResponse,
)
from venue_crm.services.bulk_progression import BulkProgressionRunner
from venue_crm.services.interaction_service import InteractionService
from venue_crm.services.progression_rule_service import ProgressionRuleService
from venue_crm.services.stage_progression import StageProgressionEngine
from venue_crm.api.deps import (
    get_bulk_runner,
    get_cache_service,
    get_contact_repo,
    get_interaction_repo,
    get_interaction_service,
    get_progression_engine,
    get_rule_repo,
    get_rule_service,
    require_minimum_role,
)

router = APIRouter(tags=["Stage Progression"])


# ---------------------------------------------------------------------------
# Rule management (ADMIN)
# ---------------------------------------------------------------------------


@router.get("/progression/rules", response_model=List[ProgressionRuleOut])
async def list_rules(
    active_only: bool = Query(True),
    _role: str = Depends(require_minimum_role(UserRole.STAFF)),
    service: ProgressionRuleService = Depends(get_rule_service),
    rule_repo: ProgressionRuleRepository = Depends(get_rule_repo),
) -> List[ProgressionRuleOut]:
    rules = await service.list_rules(rule_repo, active_only=active_only)
    return [ProgressionRuleOut.model_validate(r) for r in rules]


@router.post("/progression/rules", response_model=ProgressionRuleOut, status_code=201)
async def create_rule(
    body: ProgressionRuleCreate,
    _role: str = Depends(require_minimum_role(UserRole.ADMIN)),
    service: ProgressionRuleService = Depends(get_rule_service),
    rule_repo: ProgressionRuleRepository = Depends(get_rule_repo),
) -> ProgressionRuleOut:
    rule = await service.upsert_rule(body, rule_repo)
    return ProgressionRuleOut.model_validate(rule)


@router.put("/progression/rules/{rule_id}", response_model=ProgressionRuleOut)
async def update_rule(
    rule_id: UUID,
    body: ProgressionRuleCreate,
    _role: str = Depends(require_minimum_role(UserRole.ADMIN)),
    service: ProgressionRuleService = Depends(get_rule_service),
    rule_repo: ProgressionRuleRepository = Depends(get_rule_repo),
) -> ProgressionRuleOut:
    rule = await service.upsert_rule(body, rule_repo, rule_id=rule_id)
    return ProgressionRuleOut.model_validate(rule)


@router.post("/progression/rules/defaults", response_model=SeedRulesResponse)
async def initialize_default_rules(
    _role: str = Depends(require_minimum_role(UserRole.ADMIN)),
    service: ProgressionRuleService = Depends(get_rule_service),
    rule_repo: ProgressionRuleRepository = Depends(get_rule_repo),
) -> SeedRulesResponse:
    return SeedRulesResponse(**await service.initialize_default_rules(rule_repo))


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


@router.post(
    "/contacts/{contact_id}/progression/evaluate", response_model=ProgressionResult
)
async def evaluate_contact(
    contact_id: UUID,
    _role: str = Depends(require_minimum_role(UserRole.STAFF)),
    engine: StageProgressionEngine = Depends(get_progression_engine),
    contact_repo: ContactRepository = Depends(get_contact_repo),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
    rule_repo: ProgressionRuleRepository = Depends(get_rule_repo),
) -> ProgressionResult:
    return await engine.progress_contact(
        contact_id,
        contact_repo=contact_repo,
        interaction_repo=interaction_repo,
        rule_repo=rule_repo,
    )


@router.get(
    "/contacts/{contact_id}/progression/history",
    response_model=List[InteractionOut],
)
async def progression_history(
    contact_id: UUID,
    _role: str = Depends(require_minimum_role(UserRole.STAFF)),
    service: InteractionService = Depends(get_interaction_service),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
) -> List[InteractionOut]:
    history = await service.list_progression_history(contact_id, interaction_repo)
    return [InteractionOut.model_validate(i) for i in history]


@router.post("/progression/bulk", response_model=BulkProgressionReport)
async def run_bulk_progression(
    _role: str = Depends(require_minimum_role(UserRole.ADMIN)),
    runner: BulkProgressionRunner = Depends(get_bulk_runner),
    contact_repo: ContactRepository = Depends(get_contact_repo),
    interaction_repo: InteractionRepository = Depends(get_interaction_repo),
    rule_repo: ProgressionRuleRepository = Depends(get_rule_repo),
) -> BulkProgressionReport:
    return await runner.run(
        contact_repo=contact_repo,
        interaction_repo=interaction_repo,
        rule_repo=rule_repo,
    )


@router.get("/progression/bulk/last", response_model=BulkProgressionReport)
async def last_bulk_report(
    _role: str = Depends(require_minimum_role(UserRole.SALES)),
    cache: CacheService = Depends(get_cache_service),
) -> BulkProgressionReport:
    cached = await cache.get_json(BULK_REPORT_CACHE_KEY)
    if cached is None:
        raise HTTPException(status_code=404, detail="No bulk progression report cached")
    return BulkProgressionReport.model_validate(cached)
