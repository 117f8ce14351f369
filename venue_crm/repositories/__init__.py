"""Repository layer – all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the service layer
and the decision engines only contain business logic.
"""

from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)

__all__ = [
    "ContactRepository",
    "InteractionRepository",
    "ProgressionRuleRepository",
]
