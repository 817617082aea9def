from fastapi import APIRouter

from .features.export_responses.router import router as export_responses_router
from .features.filter_responses.router import router as filter_responses_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

router.include_router(submit_rsvp_router)
router.include_router(filter_responses_router)
router.include_router(export_responses_router)
