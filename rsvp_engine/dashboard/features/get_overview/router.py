from fastapi import APIRouter, Depends

from rsvp_engine.dashboard.dtos import EventOverview
from rsvp_engine.dashboard.features.get_report.read_model import DashboardReadModel
from rsvp_engine.dashboard.features.get_report.router import get_dashboard_read_model
from rsvp_engine.dashboard.urls import DASHBOARD_OVERVIEW_URL
from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


@router.get(DASHBOARD_OVERVIEW_URL, response_model=list[EventOverview], dependencies=[Depends(require_host)])
async def get_dashboard_overview(
    host_email: str | None = None,
    read_model: DashboardReadModel = Depends(get_dashboard_read_model),
) -> list[EventOverview]:
    """Headline RSVP numbers for every event, most recent first."""
    try:
        return await read_model.get_overview(host_email)
    except RSVPEngineError as e:
        raise to_http_exception(e) from e
