from sqlalchemy import Column, String, Integer, Boolean, DateTime, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
from sqlalchemy import text

from venue_crm.models.base import Base
from venue_crm.core.constants import TRIGGER_TYPES


class StageProgressionRule(Base):
    """Configurable rule that moves a contact from one stage to another.

    ``trigger_condition`` is a JSONB payload whose shape depends on
    ``trigger_type``; it is parsed into a typed condition model right
    before evaluation.  Rules are seeded from
    ``DEFAULT_PROGRESSION_RULES`` when the table is empty.
    """

    __tablename__ = "stage_progression_rules"
    rule_id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    from_stage = Column(String(20), nullable=False)
    to_stage = Column(String(20), nullable=False)
    trigger_type = Column(String(30), nullable=False)
    trigger_condition = Column(JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    is_active = Column(Boolean, nullable=False, server_default=text("true"))
    priority = Column(Integer, nullable=False, server_default=text("0"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            f"trigger_type IN ({', '.join(repr(t) for t in sorted(TRIGGER_TYPES))})",
            name="ck_rule_trigger_type",
        ),
        CheckConstraint("from_stage <> to_stage", name="ck_rule_distinct_stages"),
    )
