from fastapi import APIRouter

from .features.create_event.router import router as create_event_router
from .features.get_event.router import router as get_event_router

router = APIRouter()

router.include_router(create_event_router)
router.include_router(get_event_router)
