from fastapi import APIRouter

from .features.add_to_calendar.router import router as add_to_calendar_router
from .features.get_guest_info.router import router as get_guest_info_router
from .features.manage_guests.router import router as manage_guests_router
from .features.update_rsvp.router import router as update_rsvp_router

router = APIRouter()

router.include_router(manage_guests_router)
router.include_router(get_guest_info_router)
router.include_router(update_rsvp_router)
router.include_router(add_to_calendar_router)
