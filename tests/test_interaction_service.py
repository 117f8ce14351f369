from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from conftest import make_contact, make_event
from venue_crm.core.exceptions import ContactNotFoundError, InteractionNotFoundError
from venue_crm.schemas.common import HeatLevel
from venue_crm.schemas.interaction import InteractionCreate
from venue_crm.schemas.progression import ProgressionResult
from venue_crm.services.heat_scoring import HeatScoringService
from venue_crm.services.interaction_service import InteractionService
from venue_crm.services.stage_progression import StageProgressionEngine


@pytest.fixture
def service() -> InteractionService:
    return InteractionService(
        scoring_service=HeatScoringService(),
        progression_engine=StageProgressionEngine(),
    )


class TestCreateInteraction:
    @pytest.mark.asyncio
    async def test_create_recalculates_heat(
        self, service, contact_repo, interaction_repo, rule_repo
    ):
        contact = make_contact()
        contact_repo.get_by_id = AsyncMock(return_value=contact)
        interaction_repo.create = AsyncMock(return_value=MagicMock(interaction_id=uuid4()))
        interaction_repo.list_for_contact = AsyncMock(
            return_value=[
                make_event("SOCIAL_FOLLOW"),
                make_event("INFO_REQUEST"),
                make_event("SITE_VISIT"),
            ]
        )

        result = await service.create_interaction(
            contact.contact_id,
            InteractionCreate(type="SITE_VISIT"),
            contact_repo,
            interaction_repo,
            rule_repo,
            actor_role="STAFF",
        )

        assert result["lead_heat_score"] == 16
        assert result["lead_heat"] == HeatLevel.HOT
        assert result["progression"] is None
        assert contact.lead_heat == "HOT"
        assert contact.last_interaction_at is not None
        created = interaction_repo.create.await_args.kwargs
        assert created["type"] == "SITE_VISIT"
        assert created["created_by_role"] == "STAFF"
        rule_repo.get_active_rules.assert_not_awaited()
        contact_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_contact_raises(
        self, service, contact_repo, interaction_repo, rule_repo
    ):
        contact_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(ContactNotFoundError):
            await service.create_interaction(
                uuid4(),
                InteractionCreate(type="PHONE_CALL"),
                contact_repo,
                interaction_repo,
                rule_repo,
            )

        interaction_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_heat_is_updated_before_progression(
        self, contact_repo, interaction_repo, rule_repo
    ):
        """Progression must see the heat level written by this very request."""
        order = []
        contact_id = uuid4()
        contact_repo.get_by_id = AsyncMock(return_value=make_contact())
        interaction_repo.create = AsyncMock(return_value=MagicMock(interaction_id=uuid4()))

        scoring = MagicMock()
        scoring.recalculate = AsyncMock(
            side_effect=lambda *a, **kw: order.append("recalculate")
            or MagicMock(score=8.0, heat_level=HeatLevel.WARM)
        )
        engine = MagicMock()
        engine.progress_contact = AsyncMock(
            side_effect=lambda *a, **kw: order.append("progress")
            or ProgressionResult(
                progression_made=False,
                current_stage="LEAD",
                message="No progression rules were triggered",
            )
        )
        service = InteractionService(scoring, engine)

        result = await service.create_interaction(
            contact_id,
            InteractionCreate(type="PROPOSAL_SENT", evaluate_progression=True),
            contact_repo,
            interaction_repo,
            rule_repo,
        )

        assert order == ["recalculate", "progress"]
        assert engine.progress_contact.await_args.kwargs["commit"] is False
        assert result["progression"].progression_made is False
        contact_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_form_submission_progresses_contact(
        self, service, contact_repo, interaction_repo, rule_repo
    ):
        from conftest import make_rule

        contact = make_contact("UNQUALIFIED")
        contact_repo.get_by_id = AsyncMock(return_value=contact)
        interaction_repo.create = AsyncMock(return_value=MagicMock(interaction_id=uuid4()))
        interaction_repo.list_for_contact = AsyncMock(
            return_value=[make_event("FORM_SUBMITTED")]
        )
        rule_repo.get_active_rules = AsyncMock(
            return_value=[
                make_rule(
                    "UNQUALIFIED",
                    "PROSPECT",
                    "INTERACTION_COUNT",
                    {"interactionTypes": ["FORM_SUBMITTED"], "minCount": 1},
                )
            ]
        )

        result = await service.create_interaction(
            contact.contact_id,
            InteractionCreate(type="FORM_SUBMITTED", evaluate_progression=True),
            contact_repo,
            interaction_repo,
            rule_repo,
        )

        assert result["progression"].to_stage == "PROSPECT"
        assert contact.status == "PROSPECT"
        # the ingested event plus one audit record
        assert interaction_repo.create.await_count == 2
        contact_repo.commit.assert_awaited_once()

    def test_audit_type_cannot_be_ingested(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            InteractionCreate(type="STAGE_PROGRESSION")


class TestDeleteInteraction:
    @pytest.mark.asyncio
    async def test_delete_recalculates_heat(
        self, service, contact_repo, interaction_repo
    ):
        contact = make_contact()
        contact.lead_heat = "HOT"
        contact.lead_heat_score = 18.0
        site_visit = make_event("SITE_VISIT", contact_id=contact.contact_id)
        contact_repo.get_by_id = AsyncMock(return_value=contact)
        interaction_repo.get_by_id = AsyncMock(return_value=site_visit)
        # the store no longer returns the deleted event
        interaction_repo.list_for_contact = AsyncMock(
            return_value=[make_event("PRICE_QUOTE", contact_id=contact.contact_id)]
        )

        result = await service.delete_interaction(
            site_visit.interaction_id, contact_repo, interaction_repo
        )

        interaction_repo.delete.assert_awaited_once_with(site_visit)
        assert result["lead_heat_score"] == 8
        assert result["lead_heat"] == HeatLevel.WARM
        assert contact.lead_heat == "WARM"
        contact_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_interaction_raises(
        self, service, contact_repo, interaction_repo
    ):
        interaction_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(InteractionNotFoundError):
            await service.delete_interaction(uuid4(), contact_repo, interaction_repo)

        interaction_repo.delete.assert_not_awaited()
