from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy import text

from venue_crm.models.base import Base
from venue_crm.core.constants import INTERACTION_TYPES


class Interaction(Base):
    """A single touchpoint between the venue and a contact.

    Rows are append-only: they are created once and only ever deleted,
    never updated.  ``meta`` maps to the ``metadata`` column (the name is
    reserved on declarative classes).
    """

    __tablename__ = "interactions"
    interaction_id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    contact_id = Column(
        UUID(as_uuid=True),
        ForeignKey("contacts.contact_id", ondelete="CASCADE"),
        nullable=False,
    )
    type = Column(String(40), nullable=False)
    platform = Column(String(20))
    description = Column(Text)
    meta = Column("metadata", JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    created_by_role = Column(String(20))

    contact = relationship("Contact", back_populates="interactions")

    __table_args__ = (
        Index("ix_interactions_contact_created", "contact_id", "created_at"),
        Index("ix_interactions_contact_type", "contact_id", "type"),
        CheckConstraint(
            f"type IN ({', '.join(repr(t) for t in sorted(INTERACTION_TYPES))})",
            name="ck_interaction_type",
        ),
    )
