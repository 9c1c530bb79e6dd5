from fastapi import APIRouter

from src.guestlist.features.confirmation.router import router as confirmation_router
from src.guestlist.features.events.router import router as events_router
from src.guestlist.features.guests.router import router as guests_router
from src.guestlist.features.promoters.router import router as promoters_router
from src.guestlist.features.public_registration.router import (
    router as public_registration_router,
)
from src.guestlist.features.users.router import router as users_router

router = APIRouter()

router.include_router(users_router, tags=["Users"])
router.include_router(events_router, tags=["Events"])
router.include_router(guests_router, tags=["Guests"])
router.include_router(promoters_router, tags=["Promoters"])
router.include_router(public_registration_router, tags=["Public"])
router.include_router(confirmation_router, tags=["Confirmation"])
