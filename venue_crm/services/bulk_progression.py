import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from venue_crm.core.cache import CacheService
from venue_crm.core.config import settings
from venue_crm.core.constants import BULK_REPORT_CACHE_KEY, TERMINAL_STATUSES
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)
from venue_crm.schemas.progression import (
    BulkProgressionReport,
    ContactProgressionOutcome,
)
from venue_crm.services.stage_progression import StageProgressionEngine

logger = logging.getLogger(__name__)


class BulkProgressionRunner:
    """Run the stage progression engine over every non-terminal contact.

    Contacts are processed one at a time and each one is committed (or
    rolled back) on its own, so a failure for one contact is recorded in
    the report and the batch carries on.
    """

    def __init__(
        self,
        engine: StageProgressionEngine,
        cache: Optional[CacheService] = None,
    ) -> None:
        self._engine = engine
        self._cache = cache

    async def run(
        self,
        contact_repo: ContactRepository,
        interaction_repo: InteractionRepository,
        rule_repo: ProgressionRuleRepository,
        contact_ids: Optional[Iterable[UUID]] = None,
    ) -> BulkProgressionReport:
        started_at = datetime.now(timezone.utc)
        names: Dict[UUID, str] = {}
        if contact_ids is None:
            active = await contact_repo.list_active_contacts(TERMINAL_STATUSES)
            names = dict(active)
            ids: List[UUID] = [contact_id for contact_id, _ in active]
        else:
            ids = list(contact_ids)

        results: List[ContactProgressionOutcome] = []
        progressions = 0
        errors = 0

        for contact_id in ids:
            try:
                result = await self._engine.progress_contact(
                    contact_id,
                    contact_repo=contact_repo,
                    interaction_repo=interaction_repo,
                    rule_repo=rule_repo,
                )
            except Exception as exc:
                errors += 1
                logger.warning(
                    "Stage progression failed for contact %s",
                    contact_id,
                    exc_info=True,
                )
                try:
                    await contact_repo.rollback()
                except Exception:
                    logger.error(
                        "Rollback failed after error for contact %s",
                        contact_id,
                        exc_info=True,
                    )
                results.append(
                    ContactProgressionOutcome(
                        contact_id=contact_id,
                        contact_name=names.get(contact_id),
                        error=getattr(exc, "detail", None) or str(exc) or "Unknown error",
                    )
                )
                continue

            if result.progression_made:
                progressions += 1
            results.append(
                ContactProgressionOutcome(
                    contact_id=contact_id,
                    contact_name=result.contact_name or names.get(contact_id),
                    progression_made=result.progression_made,
                    from_stage=result.from_stage,
                    to_stage=result.to_stage,
                    rule_id=result.rule_id,
                    message=result.message,
                )
            )

        report = BulkProgressionReport(
            total_evaluated=len(ids),
            progressions_made=progressions,
            errors=errors,
            results=results,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Bulk stage progression: %d evaluated, %d progressed, %d failed",
            report.total_evaluated,
            report.progressions_made,
            report.errors,
        )

        if self._cache is not None:
            await self._cache.set_json(
                BULK_REPORT_CACHE_KEY,
                report.model_dump(mode="json"),
                ttl=settings.REDIS_CACHE_TTL,
            )
        return report


async def run_bulk_progression(
    session_factory: Callable[..., AsyncSession],
    cache: Optional[CacheService] = None,
) -> BulkProgressionReport:
    """One-shot: open a session and progress every active contact.

    Parameters:
        session_factory: An async context-manager callable that yields
            an ``AsyncSession`` (e.g. ``AsyncSessionLocal``).
        cache: Where to keep the resulting report, if anywhere.
    """
    runner = BulkProgressionRunner(StageProgressionEngine(), cache=cache)
    async with session_factory() as session:
        return await runner.run(
            contact_repo=ContactRepository(session),
            interaction_repo=InteractionRepository(session),
            rule_repo=ProgressionRuleRepository(session),
        )


async def start_bulk_progression_loop(
    session_factory: Callable[..., AsyncSession],
    cache: Optional[CacheService] = None,
    interval_seconds: Optional[int] = None,
) -> None:
    """Infinite loop that runs the bulk progression on a fixed interval."""
    interval = interval_seconds or settings.BULK_PROGRESSION_INTERVAL_SECONDS
    logger.info("Bulk stage progression task started (interval=%ds)", interval)
    while True:
        try:
            report = await run_bulk_progression(session_factory, cache=cache)
            if report.progressions_made:
                logger.info(
                    "Bulk stage progression cycle complete: %d contact(s) moved",
                    report.progressions_made,
                )
        except Exception:
            logger.error("Bulk stage progression cycle failed", exc_info=True)
        await asyncio.sleep(interval)
