"""Pydantic schemas package – re-exports for convenience."""

# Common enums
from venue_crm.schemas.common import (
    HeatLevel as HeatLevel,
    ContactStatus as ContactStatus,
    OpportunityStage as OpportunityStage,
    LeadSource as LeadSource,
    SocialPlatform as SocialPlatform,
    InteractionType as InteractionType,
    TriggerType as TriggerType,
    UserRole as UserRole,
    SuccessResponse as SuccessResponse,
)

# Scoring schemas
from venue_crm.schemas.scoring import (
    ScoringConfig as ScoringConfig,
    HeatScoreResult as HeatScoreResult,
    HeatScoreRequest as HeatScoreRequest,
    HeatScoreCalculation as HeatScoreCalculation,
)

# Progression schemas
from venue_crm.schemas.progression import (
    InteractionCountCondition as InteractionCountCondition,
    TimeBasedCondition as TimeBasedCondition,
    LeadHeatIncreaseCondition as LeadHeatIncreaseCondition,
    FormSubmissionCondition as FormSubmissionCondition,
    EmailEngagementCondition as EmailEngagementCondition,
    ProgressionRuleCreate as ProgressionRuleCreate,
    ProgressionRuleOut as ProgressionRuleOut,
    ProgressionResult as ProgressionResult,
    ContactProgressionOutcome as ContactProgressionOutcome,
    BulkProgressionReport as BulkProgressionReport,
)

# Contact schemas
from venue_crm.schemas.contact import (
    ContactCreate as ContactCreate,
    ContactOut as ContactOut,
    ContactListResponse as ContactListResponse,
    StatusOverrideRequest as StatusOverrideRequest,
    StatusOverrideResponse as StatusOverrideResponse,
)

# Interaction schemas
from venue_crm.schemas.interaction import (
    InteractionCreate as InteractionCreate,
    InteractionOut as InteractionOut,
    InteractionCreateResponse as InteractionCreateResponse,
    InteractionListResponse as InteractionListResponse,
)
