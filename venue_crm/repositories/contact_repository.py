from typing import Any, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_

from venue_crm.models.contact import Contact
from venue_crm.repositories.base import BaseRepository


class ContactRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``contacts`` table."""

    async def get_by_id(self, contact_id: UUID) -> Optional[Contact]:
        """Return a single contact by primary key, or ``None``."""
        result = await self._db.execute(
            select(Contact).where(Contact.contact_id == contact_id)
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> Contact:
        """Insert a new contact and return the model instance."""
        contact = Contact(**kwargs)
        self._db.add(contact)
        return contact

    async def patch(self, contact: Contact, **fields: Any) -> Contact:
        """Assign *fields* on an already-loaded contact."""
        for name, value in fields.items():
            setattr(contact, name, value)
        return contact

    async def list_active_contacts(
        self, terminal_statuses: Iterable[str]
    ) -> List[Tuple[UUID, str]]:
        """Return ``(contact_id, name)`` for contacts whose status is not terminal."""
        result = await self._db.execute(
            select(Contact.contact_id, Contact.name)
            .where(Contact.status.notin_(list(terminal_statuses)))
            .order_by(Contact.created_at.asc())
        )
        return [(row.contact_id, row.name) for row in result.all()]

    async def search(
        self,
        search: Optional[str] = None,
        lead_source: Optional[str] = None,
        lead_heat: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Contact], int]:
        """Filter contacts and return one page plus the total match count."""
        conditions = []
        if lead_source:
            conditions.append(Contact.lead_source == lead_source)
        if lead_heat:
            conditions.append(Contact.lead_heat == lead_heat)
        if status:
            conditions.append(Contact.status == status)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Contact.name).like(pattern),
                    func.lower(Contact.email).like(pattern),
                )
            )

        total = (
            await self._db.execute(
                select(func.count()).select_from(Contact).where(*conditions)
            )
        ).scalar() or 0

        result = await self._db.execute(
            select(Contact)
            .where(*conditions)
            .order_by(Contact.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total
