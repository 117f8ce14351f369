from datetime import datetime, timezone

from sqlalchemy import event

from venue_crm.models.contact import Contact
from venue_crm.models.progression_rule import StageProgressionRule


# Auto updated_at
@event.listens_for(Contact, "before_update")
@event.listens_for(StageProgressionRule, "before_update")
def update_timestamp(mapper, connection, target):
    target.updated_at = datetime.now(timezone.utc)
