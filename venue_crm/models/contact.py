from sqlalchemy import (
    Column,
    String,
    Text,
    Float,
    DateTime,
    CheckConstraint,
    Index,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy import text

from venue_crm.models.base import Base
from venue_crm.core.constants import CONTACT_STATUSES


def _in_clause(column: str, values) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in sorted(values))})"


class Contact(Base):
    """A venue sales contact and its derived lead-heat state.

    ``lead_heat_score`` and ``lead_heat`` are derived from the contact's
    interactions and rewritten on every recalculation.  ``status`` is the
    pipeline stage; it changes through the stage progression engine or an
    explicit manual override, both of which leave a ``STAGE_PROGRESSION``
    interaction behind.
    """

    __tablename__ = "contacts"
    contact_id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(40))
    company = Column(String(200))
    lead_source = Column(String(20), nullable=False, server_default="OTHER")
    lead_heat = Column(String(10), nullable=False, server_default="COLD")
    lead_heat_score = Column(Float, nullable=False, server_default=text("0"))
    status = Column(String(20), nullable=False, server_default="UNQUALIFIED")
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    last_interaction_at = Column(DateTime(timezone=True))

    interactions = relationship(
        "Interaction", back_populates="contact", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_contacts_email", "email"),
        Index("ix_contacts_status", "status"),
        Index("ix_contacts_lead_heat", "lead_heat"),
        Index("ix_contacts_last_interaction_at", "last_interaction_at"),
        CheckConstraint("lead_heat_score >= 0", name="ck_contact_heat_score"),
        CheckConstraint(
            "lead_heat IN ('COLD', 'WARM', 'HOT')", name="ck_contact_lead_heat"
        ),
        CheckConstraint(_in_clause("status", CONTACT_STATUSES), name="ck_contact_status"),
    )
