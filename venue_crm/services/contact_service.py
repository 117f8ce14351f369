import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from venue_crm.core.exceptions import ContactNotFoundError
from venue_crm.models.contact import Contact
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.schemas.common import ContactStatus, HeatLevel, InteractionType
from venue_crm.schemas.contact import ContactCreate

logger = logging.getLogger(__name__)


class ContactService:
    """Contact lookups plus the manual stage override."""

    async def create_contact(
        self, data: ContactCreate, contact_repo: ContactRepository
    ) -> Contact:
        now = datetime.now(timezone.utc)
        contact = await contact_repo.create(
            name=data.name,
            email=data.email,
            phone=data.phone,
            company=data.company,
            lead_source=data.lead_source.value,
            notes=data.notes,
            lead_heat=HeatLevel.COLD.value,
            lead_heat_score=0.0,
            status=ContactStatus.UNQUALIFIED.value,
            created_at=now,
            updated_at=now,
        )
        await contact_repo.commit()
        return contact

    async def get_contact(
        self, contact_id: UUID, contact_repo: ContactRepository
    ) -> Contact:
        contact = await contact_repo.get_by_id(contact_id)
        if contact is None:
            raise ContactNotFoundError(f"Contact {contact_id} not found")
        return contact

    async def search_contacts(
        self,
        contact_repo: ContactRepository,
        search: Optional[str] = None,
        lead_source: Optional[str] = None,
        lead_heat: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Dict[str, Any]:
        contacts, total = await contact_repo.search(
            search=search,
            lead_source=lead_source,
            lead_heat=lead_heat,
            status=status,
            limit=limit,
            offset=offset,
        )
        return {
            "contacts": contacts,
            "total": total,
            "has_more": offset + limit < total,
        }

    async def override_status(
        self,
        contact_id: UUID,
        new_status: ContactStatus,
        contact_repo: ContactRepository,
        interaction_repo: InteractionRepository,
        actor_role: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Set a contact's stage by hand, bypassing the rules.

        The audit record is flagged ``automated: False`` so it can be told
        apart from engine-driven progressions.
        """
        contact = await self.get_contact(contact_id, contact_repo)
        from_stage = contact.status
        now = datetime.now(timezone.utc)

        await contact_repo.patch(contact, status=new_status.value, updated_at=now)
        await interaction_repo.create(
            contact_id=contact_id,
            type=InteractionType.STAGE_PROGRESSION.value,
            description=f"Manually changed from {from_stage} to {new_status.value}",
            meta={
                "automated": False,
                "from_stage": from_stage,
                "to_stage": new_status.value,
                "reason": reason,
            },
            created_at=now,
            created_by_role=actor_role,
        )
        await contact_repo.commit()
        logger.info(
            "Contact %s manually moved %s -> %s by %s",
            contact_id,
            from_stage,
            new_status.value,
            actor_role,
        )
        return {
            "contact_id": contact_id,
            "from_stage": from_stage,
            "to_stage": new_status.value,
        }
