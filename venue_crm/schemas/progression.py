"""Stage progression schemas.

Trigger conditions are stored as free-form JSONB next to their
``trigger_type``.  Each trigger type has exactly one condition model
below; :func:`parse_trigger_condition` turns a stored payload into the
matching model so the predicates only ever see a typed object.  Keys are
stored snake_case, camelCase keys are accepted on input.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel
from typing_extensions import Self

from venue_crm.core.exceptions import ConditionEvaluationError
from venue_crm.schemas.common import ContactStatus, HeatLevel, TriggerType

# Rules move contacts, so they may only name contact statuses
_CONTACT_STAGES = {s.value for s in ContactStatus}
_TERMINAL_STAGES = {ContactStatus.CUSTOMER.value, ContactStatus.LOST.value}


# ---------------------------------------------------------------------------
# Trigger conditions
# ---------------------------------------------------------------------------


class _Condition(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class InteractionCountCondition(_Condition):
    interaction_types: List[str]
    min_count: int = Field(..., ge=0)


class TimeBasedCondition(_Condition):
    days_since_last_interaction: float = Field(..., ge=0)
    no_response_to_emails: int = Field(..., ge=0)


class LeadHeatIncreaseCondition(_Condition):
    min_heat_level: HeatLevel
    required_interactions: List[str] = Field(default_factory=list)


class FormSubmissionCondition(_Condition):
    pass


class EmailEngagementCondition(_Condition):
    min_engagement_score: int = Field(..., ge=0)


TriggerCondition = Union[
    InteractionCountCondition,
    TimeBasedCondition,
    LeadHeatIncreaseCondition,
    FormSubmissionCondition,
    EmailEngagementCondition,
]

CONDITION_MODELS: Dict[str, Type[_Condition]] = {
    TriggerType.INTERACTION_COUNT.value: InteractionCountCondition,
    TriggerType.TIME_BASED.value: TimeBasedCondition,
    TriggerType.LEAD_HEAT_INCREASE.value: LeadHeatIncreaseCondition,
    TriggerType.FORM_SUBMISSION.value: FormSubmissionCondition,
    TriggerType.EMAIL_ENGAGEMENT.value: EmailEngagementCondition,
}


def parse_trigger_condition(trigger_type: str, payload: Any) -> TriggerCondition:
    """Build the typed condition for *trigger_type* from a stored payload.

    Raises :class:`ConditionEvaluationError` when the trigger type is
    unknown or the payload does not fit the trigger type's shape.
    """
    model = CONDITION_MODELS.get(str(trigger_type))
    if model is None:
        raise ConditionEvaluationError(f"Unknown trigger type {trigger_type!r}")
    try:
        return model.model_validate(payload if payload is not None else {})
    except PydanticValidationError as exc:
        raise ConditionEvaluationError(
            f"Condition does not match {trigger_type}: {exc.error_count()} error(s)"
        ) from exc


# ---------------------------------------------------------------------------
# Rule management
# ---------------------------------------------------------------------------


class ProgressionRuleCreate(BaseModel):
    """Request body for creating or replacing a progression rule."""

    from_stage: str
    to_stage: str
    trigger_type: TriggerType
    trigger_condition: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    priority: int = 0

    @field_validator("from_stage", "to_stage")
    @classmethod
    def validate_stage(cls, value: str) -> str:
        value = value.upper()
        if value not in _CONTACT_STAGES:
            raise ValueError(f"{value} is not a contact status")
        return value

    @model_validator(mode="after")
    def validate_edge(self) -> Self:
        if self.from_stage == self.to_stage:
            raise ValueError("from_stage and to_stage must differ")
        if self.from_stage in _TERMINAL_STAGES:
            raise ValueError(f"{self.from_stage} is terminal and cannot be left")
        return self


class ProgressionRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rule_id: UUID
    from_stage: str
    to_stage: str
    trigger_type: str
    trigger_condition: Dict[str, Any]
    is_active: bool
    priority: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SeedRulesResponse(BaseModel):
    message: str
    count: int


# ---------------------------------------------------------------------------
# Evaluation results
# ---------------------------------------------------------------------------


class ProgressionResult(BaseModel):
    """Outcome of evaluating one contact against its stage's rules."""

    progression_made: bool
    current_stage: str
    contact_name: Optional[str] = None
    from_stage: Optional[str] = None
    to_stage: Optional[str] = None
    rule_id: Optional[UUID] = None
    rules_evaluated: int = 0
    message: str


class ContactProgressionOutcome(BaseModel):
    """Per-contact line of a bulk run; exactly one of result/error is set."""

    contact_id: UUID
    contact_name: Optional[str] = None
    progression_made: bool = False
    from_stage: Optional[str] = None
    to_stage: Optional[str] = None
    rule_id: Optional[UUID] = None
    message: Optional[str] = None
    error: Optional[str] = None


class BulkProgressionReport(BaseModel):
    total_evaluated: int
    progressions_made: int
    errors: int
    results: List[ContactProgressionOutcome] = Field(default_factory=list)
    started_at: datetime
    finished_at: datetime
