import logging
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import select, func

from venue_crm.models.progression_rule import StageProgressionRule
from venue_crm.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProgressionRuleRepository(BaseRepository):
    """Encapsulates queries against the ``stage_progression_rules`` table."""

    async def get_active_rules(self, from_stage: str) -> List[StageProgressionRule]:
        """Return active rules leaving *from_stage*, highest priority first."""
        result = await self._db.execute(
            select(StageProgressionRule)
            .where(
                StageProgressionRule.from_stage == from_stage,
                StageProgressionRule.is_active.is_(True),
            )
            .order_by(StageProgressionRule.priority.desc())
        )
        return list(result.scalars().all())

    async def list_rules(self, active_only: bool = True) -> List[StageProgressionRule]:
        query = select(StageProgressionRule)
        if active_only:
            query = query.where(StageProgressionRule.is_active.is_(True))
        result = await self._db.execute(
            query.order_by(
                StageProgressionRule.priority.desc(),
                StageProgressionRule.from_stage,
            )
        )
        return list(result.scalars().all())

    async def get_by_id(self, rule_id: UUID) -> Optional[StageProgressionRule]:
        result = await self._db.execute(
            select(StageProgressionRule).where(StageProgressionRule.rule_id == rule_id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> StageProgressionRule:
        rule = StageProgressionRule(**kwargs)
        self._db.add(rule)
        return rule

    async def seed_if_empty(self) -> int:
        """Insert the default progression rules when the table is empty.

        Returns the number of rules created; ``0`` means rules already
        existed and nothing was touched.  The canonical definitions live
        in ``venue_crm.core.default_progression_rules``.
        """
        from venue_crm.core.default_progression_rules import (
            DEFAULT_PROGRESSION_RULES,
        )

        count_result = await self._db.execute(
            select(func.count()).select_from(StageProgressionRule)
        )
        if count_result.scalar():
            return 0

        logger.info("stage_progression_rules table is empty, seeding defaults")
        for rule_data in DEFAULT_PROGRESSION_RULES:
            self._db.add(StageProgressionRule(**rule_data))
        await self._db.flush()
        logger.info(
            "Seeded %d default progression rules", len(DEFAULT_PROGRESSION_RULES)
        )
        return len(DEFAULT_PROGRESSION_RULES)
