import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from venue_crm.core.constants import (
    CONTACT_STATUSES,
    EMAIL_ENGAGEMENT_TYPES,
    HEAT_LEVEL_ORDINALS,
)
from venue_crm.core.exceptions import ConditionEvaluationError, ContactNotFoundError
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)
from venue_crm.schemas.common import InteractionType, TriggerType
from venue_crm.schemas.progression import (
    EmailEngagementCondition,
    FormSubmissionCondition,
    InteractionCountCondition,
    LeadHeatIncreaseCondition,
    ProgressionResult,
    TimeBasedCondition,
    TriggerCondition,
    parse_trigger_condition,
)
from venue_crm.services.heat_scoring import age_in_days

logger = logging.getLogger(__name__)


def _type_of(interaction: Any) -> str:
    value = interaction.type
    return getattr(value, "value", value)


# ---------------------------------------------------------------------------
# Trigger predicates, one per trigger type
# ---------------------------------------------------------------------------


def _interaction_count(
    condition: InteractionCountCondition,
    contact: Any,
    interactions: Sequence[Any],
    now: datetime,
) -> bool:
    wanted = set(condition.interaction_types)
    matching = sum(1 for i in interactions if _type_of(i) in wanted)
    return matching >= condition.min_count


def _time_based(
    condition: TimeBasedCondition,
    contact: Any,
    interactions: Sequence[Any],
    now: datetime,
) -> bool:
    if not interactions:
        return False

    # Missing timestamps are treated as "now", matching heat scoring
    def _ts(interaction: Any) -> datetime:
        created_at = getattr(interaction, "created_at", None) or now
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return created_at

    ordered = sorted(interactions, key=_ts, reverse=True)
    days_since = age_in_days(_ts(ordered[0]), now)

    reply_times = [
        _ts(i) for i in interactions if _type_of(i) == InteractionType.EMAIL_REPLIED.value
    ]
    unanswered = [
        email
        for email in interactions
        if _type_of(email) == InteractionType.EMAIL_SENT.value
        and not any(reply > _ts(email) for reply in reply_times)
    ]

    return (
        days_since >= condition.days_since_last_interaction
        and len(unanswered) >= condition.no_response_to_emails
    )


def _lead_heat_increase(
    condition: LeadHeatIncreaseCondition,
    contact: Any,
    interactions: Sequence[Any],
    now: datetime,
) -> bool:
    current = getattr(contact.lead_heat, "value", contact.lead_heat)
    has_min_heat = HEAT_LEVEL_ORDINALS.get(current, 0) >= HEAT_LEVEL_ORDINALS[
        condition.min_heat_level.value
    ]
    seen = {_type_of(i) for i in interactions}
    has_required = all(t in seen for t in condition.required_interactions)
    return has_min_heat and has_required


def _form_submission(
    condition: FormSubmissionCondition,
    contact: Any,
    interactions: Sequence[Any],
    now: datetime,
) -> bool:
    return any(
        _type_of(i) == InteractionType.FORM_SUBMITTED.value for i in interactions
    )


def _email_engagement(
    condition: EmailEngagementCondition,
    contact: Any,
    interactions: Sequence[Any],
    now: datetime,
) -> bool:
    # A raw count of engagement events, not a weighted score
    engaged = sum(1 for i in interactions if _type_of(i) in EMAIL_ENGAGEMENT_TYPES)
    return engaged >= condition.min_engagement_score


_PREDICATES: Dict[str, Callable[..., bool]] = {
    TriggerType.INTERACTION_COUNT.value: _interaction_count,
    TriggerType.TIME_BASED.value: _time_based,
    TriggerType.LEAD_HEAT_INCREASE.value: _lead_heat_increase,
    TriggerType.FORM_SUBMISSION.value: _form_submission,
    TriggerType.EMAIL_ENGAGEMENT.value: _email_engagement,
}


def rule_matches(
    rule: Any,
    contact: Any,
    interactions: Sequence[Any],
    now: Optional[datetime] = None,
) -> bool:
    """Return ``True`` if *rule*'s trigger fires for this contact.

    Never raises: an unknown trigger type or a condition that does not
    fit its trigger type counts as "no match".
    """
    trigger_type = getattr(rule.trigger_type, "value", rule.trigger_type)
    predicate = _PREDICATES.get(trigger_type)
    if predicate is None:
        logger.warning(
            "Rule %s has unknown trigger type %s", rule.rule_id, trigger_type
        )
        return False

    try:
        condition: TriggerCondition = parse_trigger_condition(
            trigger_type, rule.trigger_condition
        )
    except ConditionEvaluationError as exc:
        logger.warning("Skipping rule %s: %s", rule.rule_id, exc.detail)
        return False

    return predicate(condition, contact, interactions, now or datetime.now(timezone.utc))


def select_applicable_rules(contact: Any, rules: Sequence[Any]) -> List[Any]:
    """Active rules leaving the contact's stage, highest priority first.

    ``sorted`` is stable, so rules sharing a priority keep source order.
    Rules targeting a stage a contact cannot hold are skipped.
    """
    applicable = []
    for r in rules:
        if not r.is_active or r.from_stage != contact.status:
            continue
        if r.to_stage not in CONTACT_STATUSES:
            logger.warning(
                "Skipping rule %s: %s is not a contact status", r.rule_id, r.to_stage
            )
            continue
        applicable.append(r)
    return sorted(applicable, key=lambda r: r.priority, reverse=True)


def find_winning_rule(
    contact: Any,
    interactions: Sequence[Any],
    rules: Sequence[Any],
    now: Optional[datetime] = None,
) -> Tuple[Optional[Any], int]:
    """Return ``(winning_rule, rules_evaluated)``; first match wins."""
    now = now or datetime.now(timezone.utc)
    evaluated = 0
    for rule in select_applicable_rules(contact, rules):
        evaluated += 1
        if rule_matches(rule, contact, interactions, now):
            return rule, evaluated
    return None, evaluated


def evaluate_progression(
    contact: Any,
    interactions: Sequence[Any],
    rules: Sequence[Any],
    now: Optional[datetime] = None,
) -> ProgressionResult:
    """Decide whether *contact* should move to another stage.

    Pure: nothing is written.  :class:`StageProgressionEngine` applies
    the decision.
    """
    if not select_applicable_rules(contact, rules):
        return ProgressionResult(
            progression_made=False,
            contact_name=getattr(contact, "name", None),
            current_stage=contact.status,
            rules_evaluated=0,
            message="No applicable progression rules found",
        )

    rule, evaluated = find_winning_rule(contact, interactions, rules, now)
    if rule is None:
        return ProgressionResult(
            progression_made=False,
            contact_name=getattr(contact, "name", None),
            current_stage=contact.status,
            rules_evaluated=evaluated,
            message="No progression rules were triggered",
        )

    return ProgressionResult(
        progression_made=True,
        contact_name=getattr(contact, "name", None),
        current_stage=rule.to_stage,
        from_stage=rule.from_stage,
        to_stage=rule.to_stage,
        rule_id=rule.rule_id,
        rules_evaluated=evaluated,
        message=f"Contact progressed from {rule.from_stage} to {rule.to_stage}",
    )


class StageProgressionEngine:
    """Evaluate one contact and apply the winning rule, if any.

    On a match the contact's status is patched and a
    ``STAGE_PROGRESSION`` interaction is appended as the audit record.
    Only a missing contact raises.
    """

    async def progress_contact(
        self,
        contact_id: UUID,
        contact_repo: ContactRepository,
        interaction_repo: InteractionRepository,
        rule_repo: ProgressionRuleRepository,
        commit: bool = True,
        now: Optional[datetime] = None,
    ) -> ProgressionResult:
        contact = await contact_repo.get_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(f"Contact {contact_id} not found")

        rules = await rule_repo.get_active_rules(contact.status)
        if not rules:
            return evaluate_progression(contact, [], rules, now)

        interactions = await interaction_repo.list_for_contact(contact_id)
        result = evaluate_progression(contact, interactions, rules, now)
        if not result.progression_made:
            return result

        rule = next(r for r in rules if r.rule_id == result.rule_id)
        timestamp = datetime.now(timezone.utc)

        await contact_repo.patch(contact, status=rule.to_stage, updated_at=timestamp)
        await interaction_repo.create(
            contact_id=contact_id,
            type=InteractionType.STAGE_PROGRESSION.value,
            description=(
                f"Automatically progressed from {rule.from_stage} to {rule.to_stage}"
            ),
            meta={
                "rule_id": str(rule.rule_id),
                "trigger_type": getattr(rule.trigger_type, "value", rule.trigger_type),
                "trigger_condition": rule.trigger_condition,
                "automated": True,
            },
            created_at=timestamp,
        )
        if commit:
            await contact_repo.commit()

        logger.info(
            "Contact %s progressed %s -> %s (rule %s)",
            contact_id,
            rule.from_stage,
            rule.to_stage,
            rule.rule_id,
        )
        return result
