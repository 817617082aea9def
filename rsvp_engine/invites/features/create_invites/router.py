from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rsvp_engine.errors import RSVPEngineError, ValidationError
from rsvp_engine.events.repository.store import EventStore, get_event_store
from rsvp_engine.invites.dtos import GuestRowDTO, Invite
from rsvp_engine.invites.hosting import HostingLinkResolver, get_hosting_link_resolver
from rsvp_engine.invites.repository.store import InviteStore, get_invite_store
from rsvp_engine.invites.urls import EVENT_INVITES_URL
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


class GuestRow(BaseModel):
    name: str | None = None
    email: str | None = None
    message: str | None = None


class CreateInvitesRequest(BaseModel):
    """Either ``count`` anonymous invites or one invite per ``guest_list`` row."""

    count: int | None = None
    guest_list: list[GuestRow] | None = None
    prefer_external_hosting: bool = False


class CreateInvitesResponse(BaseModel):
    event_id: str
    count: int
    invites: list[Invite]


@router.post(
    EVENT_INVITES_URL,
    response_model=CreateInvitesResponse,
    dependencies=[Depends(require_host)],
)
async def create_invites(
    event_id: str,
    request: CreateInvitesRequest,
    event_store: EventStore = Depends(get_event_store),
    invite_store: InviteStore = Depends(get_invite_store),
    link_resolver: HostingLinkResolver = Depends(get_hosting_link_resolver),
) -> CreateInvitesResponse:
    """
    Issue invites for an event.

    With ``guest_list`` each non-blank row becomes a personalized invite;
    otherwise ``count`` anonymous invites are created. External hosting is
    attempted per invite when requested and silently falls back to local links.
    """
    try:
        event = await event_store.get(event_id)
        if request.guest_list is not None:
            invites = await invite_store.create_personalized(
                event.id,
                [GuestRowDTO(name=row.name, email=row.email, message=row.message) for row in request.guest_list],
                link_resolver,
                prefer_external_hosting=request.prefer_external_hosting,
            )
        elif request.count is not None:
            invites = await invite_store.create_batch(
                event.id,
                request.count,
                link_resolver,
                prefer_external_hosting=request.prefer_external_hosting,
            )
        else:
            raise ValidationError("count", "Provide either count or guest_list")
    except RSVPEngineError as e:
        raise to_http_exception(e) from e

    return CreateInvitesResponse(event_id=event.id, count=len(invites), invites=invites)
