import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from venue_crm.core.exceptions import (
    ConditionEvaluationError,
    InvalidRuleError,
    RuleNotFoundError,
)
from venue_crm.models.progression_rule import StageProgressionRule
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)
from venue_crm.schemas.progression import (
    ProgressionRuleCreate,
    parse_trigger_condition,
)

logger = logging.getLogger(__name__)


class ProgressionRuleService:
    """Administrative management of stage progression rules.

    Conditions are checked against their trigger type before they are
    stored, so a rule that reaches the engine with a malformed condition
    can only come from data written outside this service.
    """

    async def upsert_rule(
        self,
        data: ProgressionRuleCreate,
        rule_repo: ProgressionRuleRepository,
        rule_id: Optional[UUID] = None,
    ) -> StageProgressionRule:
        try:
            condition = parse_trigger_condition(
                data.trigger_type.value, data.trigger_condition
            )
        except ConditionEvaluationError as exc:
            raise InvalidRuleError(exc.detail) from exc

        fields: Dict[str, Any] = {
            "from_stage": data.from_stage,
            "to_stage": data.to_stage,
            "trigger_type": data.trigger_type.value,
            "trigger_condition": condition.model_dump(mode="json"),
            "is_active": data.is_active,
            "priority": data.priority,
        }

        if rule_id is not None:
            rule = await rule_repo.get_by_id(rule_id)
            if rule is None:
                raise RuleNotFoundError(f"Progression rule {rule_id} not found")
            for name, value in fields.items():
                setattr(rule, name, value)
            logger.info("Progression rule %s updated", rule_id)
        else:
            rule = await rule_repo.create(**fields)
            logger.info(
                "Progression rule created: %s -> %s (%s)",
                data.from_stage,
                data.to_stage,
                data.trigger_type.value,
            )

        await rule_repo.commit()
        return rule

    async def list_rules(
        self, rule_repo: ProgressionRuleRepository, active_only: bool = True
    ) -> List[StageProgressionRule]:
        return await rule_repo.list_rules(active_only=active_only)

    async def initialize_default_rules(
        self, rule_repo: ProgressionRuleRepository
    ) -> Dict[str, Any]:
        """Seed the default rule set once; a no-op when rules exist."""
        created = await rule_repo.seed_if_empty()
        if not created:
            existing = await rule_repo.list_rules(active_only=False)
            return {"message": "Default rules already exist", "count": len(existing)}
        await rule_repo.commit()
        return {
            "message": f"Created {created} default progression rules",
            "count": created,
        }
