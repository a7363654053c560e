from fastapi import APIRouter

from .features.approve_rsvp.router import router as approve_rsvp_router
from .features.invitation_meta.router import router as invitation_meta_router
from .features.list_rsvps.router import router as list_rsvps_router
from .features.manage_categories.router import router as manage_categories_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

router.include_router(invitation_meta_router, tags=["RSVP"])
router.include_router(submit_rsvp_router, tags=["RSVP"])
router.include_router(list_rsvps_router, tags=["Admin"])
router.include_router(approve_rsvp_router, tags=["Admin"])
router.include_router(manage_categories_router, tags=["Admin"])
