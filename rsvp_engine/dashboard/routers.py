from fastapi import APIRouter

from .features.get_overview.router import router as get_overview_router
from .features.get_report.router import router as get_report_router

router = APIRouter()

router.include_router(get_report_router)
router.include_router(get_overview_router)
