from enum import Enum
from pydantic import BaseModel


class HeatLevel(str, Enum):
    COLD = "COLD"
    WARM = "WARM"
    HOT = "HOT"


class ContactStatus(str, Enum):
    UNQUALIFIED = "UNQUALIFIED"
    PROSPECT = "PROSPECT"
    LEAD = "LEAD"
    QUALIFIED = "QUALIFIED"
    CUSTOMER = "CUSTOMER"
    LOST = "LOST"


class OpportunityStage(str, Enum):
    PROSPECT = "PROSPECT"
    QUALIFIED = "QUALIFIED"
    PROPOSAL = "PROPOSAL"
    NEGOTIATION = "NEGOTIATION"
    CLOSED_WON = "CLOSED_WON"
    CLOSED_LOST = "CLOSED_LOST"


class LeadSource(str, Enum):
    WEBSITE = "WEBSITE"
    FACEBOOK = "FACEBOOK"
    INSTAGRAM = "INSTAGRAM"
    LINKEDIN = "LINKEDIN"
    REFERRAL = "REFERRAL"
    DIRECT = "DIRECT"
    OTHER = "OTHER"


class SocialPlatform(str, Enum):
    FACEBOOK = "FACEBOOK"
    INSTAGRAM = "INSTAGRAM"
    LINKEDIN = "LINKEDIN"
    TWITTER = "TWITTER"
    TIKTOK = "TIKTOK"


class InteractionType(str, Enum):
    # Engagement touchpoints (weighted for lead heat)
    SOCIAL_FOLLOW = "SOCIAL_FOLLOW"
    SOCIAL_LIKE = "SOCIAL_LIKE"
    SOCIAL_COMMENT = "SOCIAL_COMMENT"
    SOCIAL_MESSAGE = "SOCIAL_MESSAGE"
    WEBSITE_VISIT = "WEBSITE_VISIT"
    INFO_REQUEST = "INFO_REQUEST"
    PRICE_QUOTE = "PRICE_QUOTE"
    SITE_VISIT = "SITE_VISIT"
    EMAIL_OPEN = "EMAIL_OPEN"
    EMAIL_CLICK = "EMAIL_CLICK"
    PHONE_CALL = "PHONE_CALL"
    MEETING = "MEETING"
    OTHER = "OTHER"
    # Sales-pipeline events inspected by progression rules
    EMAIL_SENT = "EMAIL_SENT"
    EMAIL_OPENED = "EMAIL_OPENED"
    EMAIL_CLICKED = "EMAIL_CLICKED"
    EMAIL_REPLIED = "EMAIL_REPLIED"
    MEETING_SCHEDULED = "MEETING_SCHEDULED"
    MEETING_COMPLETED = "MEETING_COMPLETED"
    FORM_SUBMITTED = "FORM_SUBMITTED"
    PROPOSAL_SENT = "PROPOSAL_SENT"
    CONTRACT_SENT = "CONTRACT_SENT"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    SOCIAL_MEDIA_ENGAGEMENT = "SOCIAL_MEDIA_ENGAGEMENT"
    REFERRAL_GIVEN = "REFERRAL_GIVEN"
    # Audit trail entry written by the progression engine
    STAGE_PROGRESSION = "STAGE_PROGRESSION"


class TriggerType(str, Enum):
    INTERACTION_COUNT = "INTERACTION_COUNT"
    TIME_BASED = "TIME_BASED"
    LEAD_HEAT_INCREASE = "LEAD_HEAT_INCREASE"
    FORM_SUBMISSION = "FORM_SUBMISSION"
    EMAIL_ENGAGEMENT = "EMAIL_ENGAGEMENT"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    SALES = "SALES"
    PROJECT_MANAGER = "PROJECT_MANAGER"
    STAFF = "STAFF"
    CLIENT = "CLIENT"


class SuccessResponse(BaseModel):
    """Generic success response base."""

    success: bool = True
