import datetime as dt

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.events.dtos import Event, EventCreateDTO
from rsvp_engine.events.repository.store import EventStore, get_event_store
from rsvp_engine.events.urls import CREATE_EVENT_URL
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


class EventCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    date: dt.date
    time: dt.time | None = None
    location: str | None = None
    max_guests: int | None = None
    rsvp_deadline: dt.date | None = None
    timezone: str | None = None
    host_email: str | None = None


@router.post(CREATE_EVENT_URL, response_model=Event, dependencies=[Depends(require_host)])
async def create_event(
    request: EventCreateRequest,
    event_store: EventStore = Depends(get_event_store),
) -> Event:
    """Register an event so invites and RSVPs can be collected for it."""
    try:
        return await event_store.create(EventCreateDTO(**request.model_dump()))
    except RSVPEngineError as e:
        raise to_http_exception(e) from e
