from typing import Any, Dict, List


DEFAULT_PROGRESSION_RULES: List[Dict[str, Any]] = [
    {
        "from_stage": "UNQUALIFIED",
        "to_stage": "PROSPECT",
        "trigger_type": "INTERACTION_COUNT",
        "trigger_condition": {
            "interaction_types": ["FORM_SUBMITTED", "EMAIL_REPLIED", "PHONE_CALL"],
            "min_count": 1,
        },
        "is_active": True,
        "priority": 1,
    },
    {
        "from_stage": "PROSPECT",
        "to_stage": "LEAD",
        "trigger_type": "INTERACTION_COUNT",
        "trigger_condition": {
            "interaction_types": ["MEETING_SCHEDULED", "PROPOSAL_SENT"],
            "min_count": 1,
        },
        "is_active": True,
        "priority": 1,
    },
    {
        "from_stage": "LEAD",
        "to_stage": "QUALIFIED",
        "trigger_type": "LEAD_HEAT_INCREASE",
        "trigger_condition": {
            "min_heat_level": "WARM",
            "required_interactions": ["MEETING_COMPLETED", "PROPOSAL_SENT"],
        },
        "is_active": True,
        "priority": 1,
    },
    {
        "from_stage": "QUALIFIED",
        "to_stage": "CUSTOMER",
        "trigger_type": "INTERACTION_COUNT",
        "trigger_condition": {
            "interaction_types": ["CONTRACT_SENT", "PAYMENT_RECEIVED"],
            "min_count": 1,
        },
        "is_active": True,
        "priority": 1,
    },
    {
        "from_stage": "PROSPECT",
        "to_stage": "LOST",
        "trigger_type": "TIME_BASED",
        "trigger_condition": {
            "days_since_last_interaction": 90,
            "no_response_to_emails": 3,
        },
        "is_active": True,
        "priority": 2,
    },
]
