from venue_crm.core.constants import (
    ACTIVE_STATUSES,
    CONTACT_STATUSES,
    EMAIL_ENGAGEMENT_TYPES,
    HEAT_LEVEL_ORDINALS,
    HOT_THRESHOLD,
    INTERACTION_TYPES,
    INTERACTION_WEIGHTS,
    OPPORTUNITY_STAGES,
    ROLE_LEVELS,
    TERMINAL_STATUSES,
    TRIGGER_TYPES,
    WARM_THRESHOLD,
)
from venue_crm.core.default_progression_rules import DEFAULT_PROGRESSION_RULES
from venue_crm.schemas.common import HeatLevel, TriggerType, UserRole


class TestConstantsConsistency:
    """Verify that constants, enums, and defaults stay in sync."""

    def test_weighted_types_are_interaction_types(self):
        assert set(INTERACTION_WEIGHTS).issubset(INTERACTION_TYPES)

    def test_audit_type_has_no_weight(self):
        assert "STAGE_PROGRESSION" in INTERACTION_TYPES
        assert "STAGE_PROGRESSION" not in INTERACTION_WEIGHTS

    def test_weights_are_positive_integers(self):
        assert all(isinstance(w, int) and w > 0 for w in INTERACTION_WEIGHTS.values())

    def test_thresholds_are_ordered(self):
        assert 0 < WARM_THRESHOLD < HOT_THRESHOLD

    def test_heat_ordinals_cover_every_level(self):
        assert set(HEAT_LEVEL_ORDINALS) == {h.value for h in HeatLevel}
        assert (
            HEAT_LEVEL_ORDINALS["COLD"]
            < HEAT_LEVEL_ORDINALS["WARM"]
            < HEAT_LEVEL_ORDINALS["HOT"]
        )

    def test_terminal_statuses_are_known_stages(self):
        assert TERMINAL_STATUSES.issubset(CONTACT_STATUSES | OPPORTUNITY_STAGES)

    def test_active_and_terminal_are_disjoint(self):
        assert ACTIVE_STATUSES.isdisjoint(TERMINAL_STATUSES)
        assert ACTIVE_STATUSES | (TERMINAL_STATUSES & CONTACT_STATUSES) == CONTACT_STATUSES

    def test_email_engagement_types_are_interaction_types(self):
        assert EMAIL_ENGAGEMENT_TYPES.issubset(INTERACTION_TYPES)

    def test_trigger_types_match_enum(self):
        assert TRIGGER_TYPES == {t.value for t in TriggerType}

    def test_every_role_has_a_level(self):
        assert set(ROLE_LEVELS) == {r.value for r in UserRole}
        assert ROLE_LEVELS["ADMIN"] == max(ROLE_LEVELS.values())

    def test_default_rules_reference_known_values(self):
        for rule in DEFAULT_PROGRESSION_RULES:
            assert rule["from_stage"] in CONTACT_STATUSES
            assert rule["to_stage"] in CONTACT_STATUSES
            assert rule["from_stage"] not in TERMINAL_STATUSES
            assert rule["trigger_type"] in TRIGGER_TYPES
            for t in rule["trigger_condition"].get("interaction_types", []):
                assert t in INTERACTION_TYPES
