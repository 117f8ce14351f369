"""create contacts, interactions and stage progression rules

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from venue_crm.core.constants import CONTACT_STATUSES, INTERACTION_TYPES, TRIGGER_TYPES

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _in_clause(column: str, values) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in sorted(values))})"


def upgrade() -> None:
    op.create_table(
        "contacts",
        sa.Column(
            "contact_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(40)),
        sa.Column("company", sa.String(200)),
        sa.Column("lead_source", sa.String(20), nullable=False, server_default="OTHER"),
        sa.Column("lead_heat", sa.String(10), nullable=False, server_default="COLD"),
        sa.Column(
            "lead_heat_score", sa.Float, nullable=False, server_default=sa.text("0")
        ),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default="UNQUALIFIED"
        ),
        sa.Column("notes", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("last_interaction_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("lead_heat_score >= 0", name="ck_contact_heat_score"),
        sa.CheckConstraint(
            "lead_heat IN ('COLD', 'WARM', 'HOT')", name="ck_contact_lead_heat"
        ),
        sa.CheckConstraint(
            _in_clause("status", CONTACT_STATUSES), name="ck_contact_status"
        ),
    )
    op.create_index("ix_contacts_email", "contacts", ["email"])
    op.create_index("ix_contacts_status", "contacts", ["status"])
    op.create_index("ix_contacts_lead_heat", "contacts", ["lead_heat"])
    op.create_index(
        "ix_contacts_last_interaction_at", "contacts", ["last_interaction_at"]
    )

    op.create_table(
        "interactions",
        sa.Column(
            "interaction_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "contact_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("contacts.contact_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(40), nullable=False),
        sa.Column("platform", sa.String(20)),
        sa.Column("description", sa.Text),
        sa.Column(
            "metadata",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("created_by_role", sa.String(20)),
        sa.CheckConstraint(
            _in_clause("type", INTERACTION_TYPES), name="ck_interaction_type"
        ),
    )
    op.create_index(
        "ix_interactions_contact_created", "interactions", ["contact_id", "created_at"]
    )
    op.create_index(
        "ix_interactions_contact_type", "interactions", ["contact_id", "type"]
    )

    op.create_table(
        "stage_progression_rules",
        sa.Column(
            "rule_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("from_stage", sa.String(20), nullable=False),
        sa.Column("to_stage", sa.String(20), nullable=False),
        sa.Column("trigger_type", sa.String(30), nullable=False),
        sa.Column(
            "trigger_condition",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "is_active", sa.Boolean, nullable=False, server_default=sa.text("true")
        ),
        sa.Column("priority", sa.Integer, nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            _in_clause("trigger_type", TRIGGER_TYPES), name="ck_rule_trigger_type"
        ),
        sa.CheckConstraint("from_stage <> to_stage", name="ck_rule_distinct_stages"),
    )
    # Rule lookup is always "active rules for stage X"
    op.create_index(
        "ix_stage_progression_rules_from_stage_active",
        "stage_progression_rules",
        ["from_stage", "is_active"],
    )


def downgrade() -> None:
    op.drop_table("stage_progression_rules")
    op.drop_table("interactions")
    op.drop_table("contacts")
