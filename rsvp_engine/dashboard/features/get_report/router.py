from fastapi import APIRouter, Depends

from rsvp_engine.dashboard.dtos import DashboardReport
from rsvp_engine.dashboard.features.get_report.read_model import (
    DashboardReadModel,
    StoreDashboardReadModel,
)
from rsvp_engine.dashboard.urls import DASHBOARD_REPORT_URL
from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.events.repository.store import EventStore, get_event_store
from rsvp_engine.invites.repository.store import InviteStore, get_invite_store
from rsvp_engine.responses.repository.store import ResponseStore, get_response_store
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


def get_dashboard_read_model(
    event_store: EventStore = Depends(get_event_store),
    invite_store: InviteStore = Depends(get_invite_store),
    response_store: ResponseStore = Depends(get_response_store),
) -> DashboardReadModel:
    """Dependency to get dashboard read model instance."""
    return StoreDashboardReadModel(
        event_store=event_store,
        invite_store=invite_store,
        response_store=response_store,
    )


@router.get(DASHBOARD_REPORT_URL, response_model=DashboardReport, dependencies=[Depends(require_host)])
async def get_dashboard_report(
    event_id: str,
    read_model: DashboardReadModel = Depends(get_dashboard_read_model),
) -> DashboardReport:
    """
    Aggregated statistics for the host dashboard: summary counts, daily
    trends, response milestones, dietary and guest breakdowns, insights.
    """
    try:
        return await read_model.get_report(event_id)
    except RSVPEngineError as e:
        raise to_http_exception(e) from e
