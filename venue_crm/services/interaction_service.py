import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from venue_crm.core.exceptions import (
    ContactNotFoundError,
    InteractionNotFoundError,
)
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)
from venue_crm.schemas.common import InteractionType
from venue_crm.schemas.interaction import InteractionCreate
from venue_crm.services.heat_scoring import HeatScoringService
from venue_crm.services.stage_progression import StageProgressionEngine

logger = logging.getLogger(__name__)


class InteractionService:
    """Orchestrates the interaction create / delete / list workflows.

    Every write is followed by a simple-mode heat recalculation for the
    owning contact, and that recalculation always finishes before the
    progression engine (when requested) reads the contact's heat.
    """

    def __init__(
        self,
        scoring_service: HeatScoringService,
        progression_engine: StageProgressionEngine,
    ) -> None:
        self._scoring = scoring_service
        self._progression = progression_engine

    async def create_interaction(
        self,
        contact_id: UUID,
        data: InteractionCreate,
        contact_repo: ContactRepository,
        interaction_repo: InteractionRepository,
        rule_repo: ProgressionRuleRepository,
        actor_role: Optional[str] = None,
    ) -> Dict[str, Any]:
        # 1. The contact must exist
        contact = await contact_repo.get_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(f"Contact {contact_id} not found")

        # 2. Append the event
        now = datetime.now(timezone.utc)
        interaction = await interaction_repo.create(
            contact_id=contact_id,
            type=data.type.value,
            platform=data.platform.value if data.platform else None,
            description=data.description,
            meta=data.metadata,
            created_at=now,
            created_by_role=actor_role,
        )
        await contact_repo.patch(contact, last_interaction_at=now, updated_at=now)
        await interaction_repo.flush()

        # 3. Recalculate heat (simple mode)
        heat = await self._scoring.recalculate(
            contact_id, contact_repo, interaction_repo
        )

        # 4. Optional progression, strictly after the heat update
        progression = None
        if data.evaluate_progression:
            progression = await self._progression.progress_contact(
                contact_id,
                contact_repo=contact_repo,
                interaction_repo=interaction_repo,
                rule_repo=rule_repo,
                commit=False,
            )

        await contact_repo.commit()
        logger.info(
            "Interaction %s recorded for contact %s", data.type.value, contact_id
        )

        return {
            "interaction_id": interaction.interaction_id,
            "contact_id": contact_id,
            "lead_heat_score": heat.score,
            "lead_heat": heat.heat_level,
            "progression": progression,
        }

    async def delete_interaction(
        self,
        interaction_id: UUID,
        contact_repo: ContactRepository,
        interaction_repo: InteractionRepository,
    ) -> Dict[str, Any]:
        interaction = await interaction_repo.get_by_id(interaction_id)
        if interaction is None:
            raise InteractionNotFoundError(f"Interaction {interaction_id} not found")

        contact_id = interaction.contact_id
        await interaction_repo.delete(interaction)
        await interaction_repo.flush()

        heat = await self._scoring.recalculate(
            contact_id, contact_repo, interaction_repo
        )
        await contact_repo.commit()
        logger.info("Interaction %s deleted from contact %s", interaction_id, contact_id)

        return {
            "success": True,
            "contact_id": contact_id,
            "lead_heat_score": heat.score,
            "lead_heat": heat.heat_level,
        }

    async def list_interactions(
        self,
        contact_id: UUID,
        interaction_repo: InteractionRepository,
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        interactions, total = await interaction_repo.list_page(
            contact_id, limit=limit, offset=offset
        )
        return {
            "interactions": interactions,
            "total": total,
            "has_more": offset + limit < total,
        }

    async def list_progression_history(
        self,
        contact_id: UUID,
        interaction_repo: InteractionRepository,
    ):
        """Audit trail of stage changes for a contact, newest first."""
        return await interaction_repo.list_by_type(
            contact_id, InteractionType.STAGE_PROGRESSION.value
        )
