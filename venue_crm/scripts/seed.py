"""Demo data seeder: default progression rules plus a handful of contacts."""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, func, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from venue_crm.core.config import settings
from venue_crm.models import Contact, Interaction, StageProgressionRule
from venue_crm.repositories.contact_repository import ContactRepository
from venue_crm.repositories.interaction_repository import InteractionRepository
from venue_crm.repositories.progression_rule_repository import (
    ProgressionRuleRepository,
)
from venue_crm.services.heat_scoring import HeatScoringService

# (name, email, company, lead_source, status, [(interaction type, days ago)])
DEMO_CONTACTS = [
    (
        "Amelia Hart",
        "amelia.hart@example.com",
        "Hart & Co Weddings",
        "WEBSITE",
        "UNQUALIFIED",
        [("WEBSITE_VISIT", 3), ("INFO_REQUEST", 2), ("FORM_SUBMITTED", 1)],
    ),
    (
        "Jonah Reeves",
        "jonah.reeves@example.com",
        "Northwind Events",
        "LINKEDIN",
        "PROSPECT",
        [("SOCIAL_FOLLOW", 20), ("SOCIAL_MESSAGE", 10), ("MEETING_SCHEDULED", 1)],
    ),
    (
        "Priya Nair",
        "priya.nair@example.com",
        "Lumen Conferences",
        "REFERRAL",
        "LEAD",
        [
            ("SITE_VISIT", 6),
            ("PRICE_QUOTE", 4),
            ("MEETING_COMPLETED", 3),
            ("PROPOSAL_SENT", 2),
        ],
    ),
    (
        "Tomas Lindqvist",
        "tomas.lindqvist@example.com",
        None,
        "FACEBOOK",
        "PROSPECT",
        [("EMAIL_SENT", 130), ("EMAIL_SENT", 120), ("EMAIL_SENT", 110)],
    ),
    (
        "Grace Okafor",
        "grace.okafor@example.com",
        "Okafor Galas",
        "DIRECT",
        "QUALIFIED",
        [("MEETING", 5), ("CONTRACT_SENT", 1)],
    ),
]


async def seed():
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with session_maker() as session:
        print("Seeding venue CRM demo data")

        await session.execute(
            text("TRUNCATE TABLE interactions, contacts, stage_progression_rules CASCADE")
        )
        await session.commit()
        print("Cleared existing data")

        # 0. Progression rules from the canonical defaults
        created = await ProgressionRuleRepository(session).seed_if_empty()
        await session.commit()
        print(f"Created {created} progression rules")

        # 1. Contacts with their interaction history
        now = datetime.now(timezone.utc)
        contact_repo = ContactRepository(session)
        interaction_repo = InteractionRepository(session)
        contacts = []
        for name, email, company, source, status, history in DEMO_CONTACTS:
            contact = await contact_repo.create(
                name=name,
                email=email,
                company=company,
                lead_source=source,
                status=status,
                created_at=now - timedelta(days=max(d for _, d in history) + 1),
            )
            await session.flush()
            for interaction_type, days_ago in history:
                await interaction_repo.create(
                    contact_id=contact.contact_id,
                    type=interaction_type,
                    meta={"seeded": True},
                    created_at=now - timedelta(days=days_ago),
                )
            contact.last_interaction_at = now - timedelta(
                days=min(d for _, d in history)
            )
            contacts.append(contact)
        await session.flush()
        print(f"Created {len(contacts)} contacts")

        # 2. Heat scores for every seeded contact
        scoring = HeatScoringService()
        for contact in contacts:
            await scoring.recalculate(contact.contact_id, contact_repo, interaction_repo)
        await session.commit()
        print("Recalculated lead heat")

        contact_cnt = (
            await session.execute(select(func.count()).select_from(Contact))
        ).scalar()
        interaction_cnt = (
            await session.execute(select(func.count()).select_from(Interaction))
        ).scalar()
        rule_cnt = (
            await session.execute(
                select(func.count()).select_from(StageProgressionRule)
            )
        ).scalar()
        print("\nValidation:")
        print(f"  Contacts: {contact_cnt}")
        print(f"  Interactions: {interaction_cnt}")
        print(f"  Progression rules: {rule_cnt}")
        print("Seeding complete")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
