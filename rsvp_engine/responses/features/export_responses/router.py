from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.events.repository.store import EventStore, get_event_store
from rsvp_engine.responses.dtos import ExportFormat
from rsvp_engine.responses.repository.store import ResponseStore, get_response_store
from rsvp_engine.responses.urls import EXPORT_RSVPS_URL
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()

MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
}


@router.get(EXPORT_RSVPS_URL, dependencies=[Depends(require_host)])
async def export_responses(
    event_id: str,
    format: str = ExportFormat.CSV.value,
    event_store: EventStore = Depends(get_event_store),
    response_store: ResponseStore = Depends(get_response_store),
) -> StreamingResponse:
    """Download an event's responses as a CSV or JSON attachment."""
    try:
        event = await event_store.get(event_id)
        content = await response_store.export(event.id, format)
    except RSVPEngineError as e:
        raise to_http_exception(e) from e

    export_format = ExportFormat(format.strip().lower() or ExportFormat.CSV.value)
    return StreamingResponse(
        iter([content]),
        media_type=MEDIA_TYPES[export_format],
        headers={
            "Content-Disposition": f"attachment; filename=rsvps_{event.id}.{export_format.value}"
        },
    )
