from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import TYPE_CHECKING, AsyncGenerator, Optional
from uuid import uuid4
from unittest.mock import AsyncMock

if TYPE_CHECKING:
    from venue_crm.core.cache import CacheService

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from venue_crm.main import app

# Fixed clock shared by the scoring and progression tests
NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_event(
    interaction_type: str,
    days_ago: Optional[float] = 0,
    contact_id=None,
) -> SimpleNamespace:
    """Minimal interaction: only ``type`` and ``created_at`` matter to the engines."""
    created_at = None if days_ago is None else NOW - timedelta(days=days_ago)
    return SimpleNamespace(
        interaction_id=uuid4(),
        contact_id=contact_id,
        type=interaction_type,
        created_at=created_at,
    )


def make_rule(
    from_stage: str,
    to_stage: str,
    trigger_type: str,
    trigger_condition: dict,
    priority: int = 1,
    is_active: bool = True,
) -> SimpleNamespace:
    return SimpleNamespace(
        rule_id=uuid4(),
        from_stage=from_stage,
        to_stage=to_stage,
        trigger_type=trigger_type,
        trigger_condition=trigger_condition,
        priority=priority,
        is_active=is_active,
    )


def make_contact(status: str = "UNQUALIFIED", lead_heat: str = "COLD") -> SimpleNamespace:
    return SimpleNamespace(
        contact_id=uuid4(),
        name="Test Contact",
        status=status,
        lead_heat=lead_heat,
        lead_heat_score=0.0,
    )


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Yield an ``httpx.AsyncClient`` wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Return an ``AsyncMock`` that behaves like ``redis.asyncio.Redis``."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    redis.ping = AsyncMock()
    return redis


@pytest.fixture
def mock_cache(mock_redis) -> "CacheService":
    """Return a ``CacheService`` backed by the mock Redis client."""
    from venue_crm.core.cache import CacheService

    return CacheService(redis_client=mock_redis)


@pytest.fixture
def contact_repo() -> AsyncMock:
    """Mocked ``ContactRepository``; ``patch`` writes through like the real one."""
    repo = AsyncMock()

    async def _patch(contact, **fields):
        for name, value in fields.items():
            setattr(contact, name, value)
        return contact

    repo.patch = AsyncMock(side_effect=_patch)
    return repo


@pytest.fixture
def interaction_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.list_for_contact = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def rule_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.get_active_rules = AsyncMock(return_value=[])
    return repo
