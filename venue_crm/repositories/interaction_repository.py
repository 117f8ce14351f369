from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func

from venue_crm.models.interaction import Interaction
from venue_crm.repositories.base import BaseRepository


class InteractionRepository(BaseRepository):
    """Encapsulates queries against the ``interactions`` table."""

    async def create(self, **kwargs: Any) -> Interaction:
        """Insert a new interaction record."""
        interaction = Interaction(**kwargs)
        self._db.add(interaction)
        return interaction

    async def get_by_id(self, interaction_id: UUID) -> Optional[Interaction]:
        result = await self._db.execute(
            select(Interaction).where(Interaction.interaction_id == interaction_id)
        )
        return result.scalar_one_or_none()

    async def delete(self, interaction: Interaction) -> None:
        await self._db.delete(interaction)

    async def list_for_contact(self, contact_id: UUID) -> List[Interaction]:
        """Return every interaction for a contact (order not guaranteed)."""
        result = await self._db.execute(
            select(Interaction).where(Interaction.contact_id == contact_id)
        )
        return list(result.scalars().all())

    async def list_page(
        self, contact_id: UUID, limit: int = 50, offset: int = 0
    ) -> Tuple[List[Interaction], int]:
        """Return a newest-first page of interactions and the total count."""
        total = (
            await self._db.execute(
                select(func.count())
                .select_from(Interaction)
                .where(Interaction.contact_id == contact_id)
            )
        ).scalar() or 0

        result = await self._db.execute(
            select(Interaction)
            .where(Interaction.contact_id == contact_id)
            .order_by(Interaction.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def list_by_type(
        self, contact_id: UUID, interaction_type: str
    ) -> List[Interaction]:
        """Return a contact's interactions of one type, newest first."""
        result = await self._db.execute(
            select(Interaction)
            .where(
                Interaction.contact_id == contact_id,
                Interaction.type == interaction_type,
            )
            .order_by(Interaction.created_at.desc())
        )
        return list(result.scalars().all())
