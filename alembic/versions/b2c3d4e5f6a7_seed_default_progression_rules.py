"""seed default stage progression rules

Revision ID: b2c3d4e5f6a7
Revises: a1b2c3d4e5f6
Create Date: 2026-10-01 09:30:00.000000

Inserts the default rule set into ``stage_progression_rules`` only when
the table is empty, mirroring ``ProgressionRuleRepository.seed_if_empty``.

The rule values are derived from
``venue_crm.core.default_progression_rules``.  Do NOT edit values here.
"""

from typing import Sequence, Union

import json
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b2c3d4e5f6a7"
down_revision: Union[str, None] = "a1b2c3d4e5f6"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

from venue_crm.core.default_progression_rules import DEFAULT_PROGRESSION_RULES  # noqa: E402


def upgrade() -> None:
    values = []
    for rule in DEFAULT_PROGRESSION_RULES:
        condition_json = json.dumps(rule["trigger_condition"]).replace("'", "''")
        values.append(
            f"('{rule['from_stage']}', '{rule['to_stage']}', "
            f"'{rule['trigger_type']}', '{condition_json}'::jsonb, "
            f"{'true' if rule['is_active'] else 'false'}, {rule['priority']})"
        )

    op.execute(
        f"""
        INSERT INTO stage_progression_rules
            (from_stage, to_stage, trigger_type, trigger_condition, is_active, priority)
        SELECT * FROM (VALUES {', '.join(values)}) AS defaults
        WHERE NOT EXISTS (SELECT 1 FROM stage_progression_rules);
        """
    )


def downgrade() -> None:
    # Remove only rows matching a default edge + trigger
    for rule in DEFAULT_PROGRESSION_RULES:
        op.execute(
            "DELETE FROM stage_progression_rules "
            f"WHERE from_stage = '{rule['from_stage']}' "
            f"AND to_stage = '{rule['to_stage']}' "
            f"AND trigger_type = '{rule['trigger_type']}';"
        )
