import logging
from typing import Optional

from fastapi import Depends, Header
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from venue_crm.core.config import settings
from venue_crm.core.database import get_db
from venue_crm.core.permissions import require_role
from venue_crm.schemas.common import UserRole
from venue_crm.services.heat_scoring import HeatScoringService
from venue_crm.services.stage_progression import StageProgressionEngine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Caller role
# ---------------------------------------------------------------------------


async def get_actor_role(
    x_user_role: Optional[str] = Header(None, alias="X-User-Role"),
) -> Optional[str]:
    """Role of the caller as asserted by the upstream auth gateway."""
    return x_user_role.upper() if x_user_role else None


def require_minimum_role(minimum: UserRole):
    """Build a dependency that rejects callers below *minimum*."""

    async def _check(actor_role: Optional[str] = Depends(get_actor_role)) -> str:
        require_role(actor_role, minimum)
        return actor_role

    return _check


# ---------------------------------------------------------------------------
# Redis client factory
# ---------------------------------------------------------------------------


async def get_redis_client() -> Redis:
    """Get an async Redis client instance using connection pooling."""
    try:
        client = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
        await client.ping()
        return client
    except Exception:
        logger.warning("Redis unavailable – report caching disabled for this request")
        return None  # type: ignore[return-value]


async def get_cache_service(
    redis_client: Redis = Depends(get_redis_client),
):
    """Build a :class:`CacheService` backed by the shared Redis client."""
    from venue_crm.core.cache import CacheService

    return CacheService(redis_client=redis_client)


# ---------------------------------------------------------------------------
# Repository factory functions (one per repository, each gets the shared db)
# ---------------------------------------------------------------------------


async def get_contact_repo(
    db: AsyncSession = Depends(get_db),
):
    from venue_crm.repositories.contact_repository import ContactRepository

    return ContactRepository(db)


async def get_interaction_repo(
    db: AsyncSession = Depends(get_db),
):
    from venue_crm.repositories.interaction_repository import InteractionRepository

    return InteractionRepository(db)


async def get_rule_repo(
    db: AsyncSession = Depends(get_db),
):
    from venue_crm.repositories.progression_rule_repository import (
        ProgressionRuleRepository,
    )

    return ProgressionRuleRepository(db)


# ---------------------------------------------------------------------------
# Service factory functions
# ---------------------------------------------------------------------------


async def get_scoring_service() -> HeatScoringService:
    return HeatScoringService()


async def get_progression_engine() -> StageProgressionEngine:
    return StageProgressionEngine()


async def get_interaction_service(
    scoring_service: HeatScoringService = Depends(get_scoring_service),
    progression_engine: StageProgressionEngine = Depends(get_progression_engine),
):
    """Build an :class:`InteractionService` with injected dependencies."""
    from venue_crm.services.interaction_service import InteractionService

    return InteractionService(
        scoring_service=scoring_service,
        progression_engine=progression_engine,
    )


async def get_contact_service():
    from venue_crm.services.contact_service import ContactService

    return ContactService()


async def get_rule_service():
    from venue_crm.services.progression_rule_service import ProgressionRuleService

    return ProgressionRuleService()


async def get_bulk_runner(
    progression_engine: StageProgressionEngine = Depends(get_progression_engine),
    cache=Depends(get_cache_service),
):
    """Build a :class:`BulkProgressionRunner` that caches its report."""
    from venue_crm.services.bulk_progression import BulkProgressionRunner

    return BulkProgressionRunner(engine=progression_engine, cache=cache)
