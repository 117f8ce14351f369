from fastapi import APIRouter

from venue_crm.api.v1.endpoints import contacts, interactions, progression, health

router = APIRouter(prefix="/api/v1")

router.include_router(contacts.router)
router.include_router(interactions.router)
router.include_router(progression.router)
router.include_router(health.router)
