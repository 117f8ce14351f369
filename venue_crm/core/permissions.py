"""Role-based capability checks.

Authentication happens upstream; by the time a request reaches this
service the caller's role is known.  The engines never look at roles,
the API layer calls :func:`require_role` before invoking them.
"""

import logging
from typing import Optional

from venue_crm.core.constants import ROLE_LEVELS
from venue_crm.core.exceptions import AuthorizationError
from venue_crm.schemas.common import UserRole

logger = logging.getLogger(__name__)


def has_role(actor_role: Optional[str], minimum: UserRole) -> bool:
    """Return ``True`` if *actor_role* is at or above *minimum*."""
    if actor_role is None:
        return False
    level = ROLE_LEVELS.get(actor_role.upper(), 0)
    return level >= ROLE_LEVELS[minimum.value]


def require_role(actor_role: Optional[str], minimum: UserRole) -> None:
    """Raise :class:`AuthorizationError` unless *actor_role* is sufficient."""
    if not has_role(actor_role, minimum):
        logger.warning(
            "Role %s rejected, %s or above required", actor_role, minimum.value
        )
        raise AuthorizationError(
            f"Role {actor_role or 'anonymous'} is not permitted; "
            f"requires {minimum.value} or above"
        )
