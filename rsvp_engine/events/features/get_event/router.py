from fastapi import APIRouter, Depends

from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.events.dtos import Event
from rsvp_engine.events.repository.store import EventStore, get_event_store
from rsvp_engine.events.urls import GET_EVENT_URL
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


@router.get(GET_EVENT_URL, response_model=Event)
async def get_event(
    event_id: str,
    event_store: EventStore = Depends(get_event_store),
) -> Event:
    try:
        return await event_store.get(event_id)
    except RSVPEngineError as e:
        raise to_http_exception(e) from e
