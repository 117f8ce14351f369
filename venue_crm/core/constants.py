from typing import Dict, FrozenSet

from venue_crm.schemas.common import (
    ContactStatus,
    HeatLevel,
    InteractionType,
    OpportunityStage,
    TriggerType,
    UserRole,
)

CONTACT_STATUSES: FrozenSet[str] = frozenset(s.value for s in ContactStatus)
OPPORTUNITY_STAGES: FrozenSet[str] = frozenset(s.value for s in OpportunityStage)

# Terminal stages are never evaluated by the bulk progression runner
TERMINAL_STATUSES: FrozenSet[str] = frozenset(
    {
        ContactStatus.CUSTOMER.value,
        ContactStatus.LOST.value,
        OpportunityStage.CLOSED_WON.value,
        OpportunityStage.CLOSED_LOST.value,
    }
)

ACTIVE_STATUSES: FrozenSet[str] = CONTACT_STATUSES - TERMINAL_STATUSES

INTERACTION_TYPES: FrozenSet[str] = frozenset(t.value for t in InteractionType)
TRIGGER_TYPES: FrozenSet[str] = frozenset(t.value for t in TriggerType)

# Shared by simple and advanced heat scoring.  Types not listed weigh 0.
INTERACTION_WEIGHTS: Dict[str, int] = {
    "SOCIAL_FOLLOW": 1,
    "SOCIAL_LIKE": 1,
    "SOCIAL_COMMENT": 2,
    "SOCIAL_MESSAGE": 3,
    "WEBSITE_VISIT": 2,
    "INFO_REQUEST": 5,
    "PRICE_QUOTE": 8,
    "SITE_VISIT": 10,
    "EMAIL_OPEN": 1,
    "EMAIL_CLICK": 2,
    "PHONE_CALL": 5,
    "MEETING": 8,
    "OTHER": 1,
}

# Heat classification thresholds (inclusive lower bounds)
HOT_THRESHOLD: int = 16
WARM_THRESHOLD: int = 6

HEAT_LEVEL_ORDINALS: Dict[str, int] = {
    HeatLevel.COLD.value: 1,
    HeatLevel.WARM.value: 2,
    HeatLevel.HOT.value: 3,
}

# Frequency boost always looks at the trailing week
FREQUENCY_WINDOW_DAYS: int = 7

EMAIL_ENGAGEMENT_TYPES: FrozenSet[str] = frozenset(
    {
        InteractionType.EMAIL_OPENED.value,
        InteractionType.EMAIL_CLICKED.value,
        InteractionType.EMAIL_REPLIED.value,
    }
)

# Higher number = more privileges
ROLE_LEVELS: Dict[str, int] = {
    UserRole.CLIENT.value: 1,
    UserRole.STAFF.value: 2,
    UserRole.PROJECT_MANAGER.value: 3,
    UserRole.SALES.value: 4,
    UserRole.ADMIN.value: 5,
}

BULK_REPORT_CACHE_KEY: str = "progression:bulk:last_report"
