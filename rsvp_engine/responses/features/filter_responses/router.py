from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.events.repository.store import EventStore, get_event_store
from rsvp_engine.responses.dtos import Response, ResponseFilters
from rsvp_engine.responses.repository.store import ResponseStore, get_response_store
from rsvp_engine.responses.urls import EVENT_RSVPS_URL
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


class FilteredResponsesResponse(BaseModel):
    event_id: str
    responses: list[Response]
    total_count: int
    original_count: int


@router.get(EVENT_RSVPS_URL, response_model=FilteredResponsesResponse, dependencies=[Depends(require_host)])
async def filter_responses(
    event_id: str,
    search: str | None = None,
    attendance: str = "all",
    sort_by: str = "submitted_at",
    descending: bool = False,
    dietary_options: list[str] = Query(default=[]),
    min_guests: int | None = None,
    max_guests: int | None = None,
    submitted_from: datetime | None = None,
    submitted_to: datetime | None = None,
    event_store: EventStore = Depends(get_event_store),
    response_store: ResponseStore = Depends(get_response_store),
) -> FilteredResponsesResponse:
    """List an event's responses, filtered and sorted for the host dashboard."""
    filters = ResponseFilters(
        search=search,
        attendance=attendance,
        sort_by=sort_by,
        descending=descending,
        dietary_options=dietary_options,
        min_guests=min_guests,
        max_guests=max_guests,
        submitted_from=submitted_from,
        submitted_to=submitted_to,
    )
    try:
        event = await event_store.get(event_id)
        result = await response_store.filter(event.id, filters)
    except RSVPEngineError as e:
        raise to_http_exception(e) from e

    return FilteredResponsesResponse(
        event_id=event.id,
        responses=result.responses,
        total_count=result.total_count,
        original_count=result.original_count,
    )
