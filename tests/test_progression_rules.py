from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from conftest import NOW, make_contact, make_event, make_rule
from venue_crm.core.default_progression_rules import DEFAULT_PROGRESSION_RULES
from venue_crm.core.exceptions import InvalidRuleError, RuleNotFoundError
from venue_crm.schemas.progression import ProgressionRuleCreate, parse_trigger_condition
from venue_crm.services.progression_rule_service import ProgressionRuleService
from venue_crm.services.stage_progression import evaluate_progression


class TestProgressionRuleCreate:
    """Request-level validation of rule definitions."""

    def test_stages_are_normalised(self):
        rule = ProgressionRuleCreate(
            from_stage="prospect",
            to_stage="lead",
            trigger_type="FORM_SUBMISSION",
        )

        assert rule.from_stage == "PROSPECT"
        assert rule.to_stage == "LEAD"

    def test_unknown_stage_rejected(self):
        with pytest.raises(ValidationError):
            ProgressionRuleCreate(
                from_stage="PROSPECT", to_stage="MARRIED", trigger_type="FORM_SUBMISSION"
            )

    def test_self_loop_rejected(self):
        with pytest.raises(ValidationError):
            ProgressionRuleCreate(
                from_stage="LEAD", to_stage="LEAD", trigger_type="FORM_SUBMISSION"
            )

    @pytest.mark.parametrize(
        "from_stage, to_stage",
        [("LEAD", "PROPOSAL"), ("NEGOTIATION", "QUALIFIED"), ("PROSPECT", "CLOSED_WON")],
    )
    def test_opportunity_stages_rejected(self, from_stage, to_stage):
        with pytest.raises(ValidationError):
            ProgressionRuleCreate(
                from_stage=from_stage, to_stage=to_stage, trigger_type="FORM_SUBMISSION"
            )

    @pytest.mark.parametrize("terminal", ["CUSTOMER", "LOST"])
    def test_terminal_from_stage_rejected(self, terminal):
        with pytest.raises(ValidationError):
            ProgressionRuleCreate(
                from_stage=terminal, to_stage="PROSPECT", trigger_type="FORM_SUBMISSION"
            )


class TestProgressionRuleService:
    @pytest.mark.asyncio
    async def test_create_stores_snake_case_condition(self, rule_repo):
        rule_repo.create = AsyncMock(side_effect=lambda **kw: make_rule(**kw))
        data = ProgressionRuleCreate(
            from_stage="UNQUALIFIED",
            to_stage="PROSPECT",
            trigger_type="INTERACTION_COUNT",
            trigger_condition={"interactionTypes": ["FORM_SUBMITTED"], "minCount": 1},
        )

        await ProgressionRuleService().upsert_rule(data, rule_repo)

        stored = rule_repo.create.await_args.kwargs
        assert stored["trigger_condition"] == {
            "interaction_types": ["FORM_SUBMITTED"],
            "min_count": 1,
        }
        assert stored["trigger_type"] == "INTERACTION_COUNT"
        rule_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_condition_must_fit_trigger_type(self, rule_repo):
        data = ProgressionRuleCreate(
            from_stage="PROSPECT",
            to_stage="LOST",
            trigger_type="TIME_BASED",
            trigger_condition={"minCount": 3},
        )

        with pytest.raises(InvalidRuleError):
            await ProgressionRuleService().upsert_rule(data, rule_repo)

        rule_repo.create.assert_not_awaited()
        rule_repo.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, rule_repo):
        existing = make_rule("PROSPECT", "LEAD", "FORM_SUBMISSION", {}, priority=1)
        rule_repo.get_by_id = AsyncMock(return_value=existing)
        data = ProgressionRuleCreate(
            from_stage="PROSPECT",
            to_stage="LEAD",
            trigger_type="EMAIL_ENGAGEMENT",
            trigger_condition={"minEngagementScore": 4},
            priority=7,
            is_active=False,
        )

        rule = await ProgressionRuleService().upsert_rule(
            data, rule_repo, rule_id=existing.rule_id
        )

        assert rule is existing
        assert rule.trigger_type == "EMAIL_ENGAGEMENT"
        assert rule.trigger_condition == {"min_engagement_score": 4}
        assert rule.priority == 7
        assert rule.is_active is False

    @pytest.mark.asyncio
    async def test_update_unknown_rule_raises(self, rule_repo):
        rule_repo.get_by_id = AsyncMock(return_value=None)
        data = ProgressionRuleCreate(
            from_stage="PROSPECT", to_stage="LEAD", trigger_type="FORM_SUBMISSION"
        )

        with pytest.raises(RuleNotFoundError):
            await ProgressionRuleService().upsert_rule(data, rule_repo, rule_id=uuid4())

    @pytest.mark.asyncio
    async def test_seed_defaults_once(self, rule_repo):
        rule_repo.seed_if_empty = AsyncMock(return_value=len(DEFAULT_PROGRESSION_RULES))

        result = await ProgressionRuleService().initialize_default_rules(rule_repo)

        assert result["count"] == len(DEFAULT_PROGRESSION_RULES)
        rule_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_seed_is_noop_when_rules_exist(self, rule_repo):
        rule_repo.seed_if_empty = AsyncMock(return_value=0)
        rule_repo.list_rules = AsyncMock(return_value=[object(), object()])

        result = await ProgressionRuleService().initialize_default_rules(rule_repo)

        assert result == {"message": "Default rules already exist", "count": 2}
        rule_repo.commit.assert_not_awaited()


class TestDefaultRules:
    """The shipped rule set must be usable by the engine as-is."""

    @pytest.mark.parametrize("rule_data", DEFAULT_PROGRESSION_RULES)
    def test_every_default_condition_parses(self, rule_data):
        parse_trigger_condition(rule_data["trigger_type"], rule_data["trigger_condition"])

    @pytest.mark.parametrize("rule_data", DEFAULT_PROGRESSION_RULES)
    def test_every_default_rule_is_a_valid_definition(self, rule_data):
        ProgressionRuleCreate(**rule_data)

    def test_lead_to_qualified_default(self):
        rules = [make_rule(**r) for r in DEFAULT_PROGRESSION_RULES]
        contact = make_contact("LEAD", lead_heat="WARM")
        events = [make_event("MEETING_COMPLETED"), make_event("PROPOSAL_SENT")]

        result = evaluate_progression(contact, events, rules, now=NOW)

        assert result.to_stage == "QUALIFIED"

    def test_prospect_stale_rule_outranks_lead_rule(self):
        rules = [make_rule(**r) for r in DEFAULT_PROGRESSION_RULES]
        contact = make_contact("PROSPECT")
        events = [make_event("MEETING_SCHEDULED", days_ago=200)] + [
            make_event("EMAIL_SENT", days_ago=d) for d in (150, 140, 130)
        ]

        result = evaluate_progression(contact, events, rules, now=NOW)

        assert result.to_stage == "LOST"
