"""API-layer dependency functions.

Re-exports all dependency factories from ``venue_crm.dependencies`` so
that endpoint modules only need to import from ``venue_crm.api.deps``.
"""

from venue_crm.dependencies import (
    # Caller role
    get_actor_role,
    require_minimum_role,
    # Repository factories
    get_contact_repo,
    get_interaction_repo,
    get_rule_repo,
    # Service factories
    get_scoring_service,
    get_progression_engine,
    get_interaction_service,
    get_contact_service,
    get_rule_service,
    get_bulk_runner,
    # Redis
    get_redis_client,
    get_cache_service,
)

__all__ = [
    "get_actor_role",
    "require_minimum_role",
    "get_contact_repo",
    "get_interaction_repo",
    "get_rule_repo",
    "get_scoring_service",
    "get_progression_engine",
    "get_interaction_service",
    "get_contact_service",
    "get_rule_service",
    "get_bulk_runner",
    "get_redis_client",
    "get_cache_service",
]
