from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.events.repository.store import EventStore, get_event_store
from rsvp_engine.responses.dtos import Response, ResponseSubmissionDTO
from rsvp_engine.responses.repository.store import ResponseStore, get_response_store
from rsvp_engine.responses.urls import EVENT_RSVPS_URL
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


class RSVPSubmitRequest(BaseModel):
    guest_name: str
    guest_email: str
    attendance: str
    invite_id: str | None = None
    # Hosted forms post loose values; the store normalizes them
    guest_count: Any = None
    dietary_options: list[str] | str | None = None
    dietary_restrictions: str | None = None
    message: str | None = None


@router.post(EVENT_RSVPS_URL, response_model=Response)
async def submit_rsvp(
    event_id: str,
    request: RSVPSubmitRequest,
    event_store: EventStore = Depends(get_event_store),
    response_store: ResponseStore = Depends(get_response_store),
) -> Response:
    """
    Submit a guest's RSVP for an event.

    A second submission for the same invite replaces the first one. An
    ``invite_id`` that does not belong to this event is accepted and flagged
    ``unmatched_invite``.
    """
    try:
        event = await event_store.get(event_id)
        return await response_store.submit(
            ResponseSubmissionDTO(
                event_id=event.id,
                guest_name=request.guest_name,
                guest_email=request.guest_email,
                attendance=request.attendance,
                invite_id=request.invite_id,
                guest_count=request.guest_count,
                dietary_options=request.dietary_options,
                dietary_restrictions=request.dietary_restrictions,
                message=request.message,
            )
        )
    except RSVPEngineError as e:
        raise to_http_exception(e) from e
