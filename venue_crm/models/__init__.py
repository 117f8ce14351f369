from venue_crm.models.base import Base
from venue_crm.models.contact import Contact
from venue_crm.models.interaction import Interaction
from venue_crm.models.progression_rule import StageProgressionRule

# Import event listeners to register them
from venue_crm.models import listeners  # noqa: F401

__all__ = [
    "Base",
    "Contact",
    "Interaction",
    "StageProgressionRule",
]
