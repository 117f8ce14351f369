from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from conftest import make_contact
from venue_crm.core.exceptions import ContactNotFoundError
from venue_crm.schemas.common import ContactStatus
from venue_crm.schemas.contact import ContactCreate
from venue_crm.services.contact_service import ContactService


class TestCreateContact:
    @pytest.mark.asyncio
    async def test_new_contact_starts_cold_and_unqualified(self, contact_repo):
        contact_repo.create = AsyncMock(return_value=MagicMock())

        await ContactService().create_contact(
            ContactCreate(name="Ada", email="ada@example.com"), contact_repo
        )

        fields = contact_repo.create.await_args.kwargs
        assert fields["status"] == "UNQUALIFIED"
        assert fields["lead_heat"] == "COLD"
        assert fields["lead_heat_score"] == 0.0
        assert fields["lead_source"] == "OTHER"
        contact_repo.commit.assert_awaited_once()


class TestOverrideStatus:
    """Manual stage changes bypass the rules but still leave an audit record."""

    @pytest.mark.asyncio
    async def test_override_writes_manual_audit(self, contact_repo, interaction_repo):
        contact = make_contact("PROSPECT")
        contact_repo.get_by_id = AsyncMock(return_value=contact)

        result = await ContactService().override_status(
            contact.contact_id,
            ContactStatus.LOST,
            contact_repo,
            interaction_repo,
            actor_role="SALES",
            reason="Booked another venue",
        )

        assert result == {
            "contact_id": contact.contact_id,
            "from_stage": "PROSPECT",
            "to_stage": "LOST",
        }
        assert contact.status == "LOST"
        audit = interaction_repo.create.await_args.kwargs
        assert audit["type"] == "STAGE_PROGRESSION"
        assert audit["meta"]["automated"] is False
        assert audit["meta"]["reason"] == "Booked another venue"
        assert audit["created_by_role"] == "SALES"
        contact_repo.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_override_unknown_contact(self, contact_repo, interaction_repo):
        contact_repo.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(ContactNotFoundError):
            await ContactService().override_status(
                uuid4(), ContactStatus.LEAD, contact_repo, interaction_repo
            )

        interaction_repo.create.assert_not_awaited()
