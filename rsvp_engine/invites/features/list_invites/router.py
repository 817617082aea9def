from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.invites.dtos import Invite
from rsvp_engine.invites.repository.store import InviteStore, get_invite_store
from rsvp_engine.invites.urls import EVENT_INVITES_URL, GET_INVITE_URL
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


class InviteStatsResponse(BaseModel):
    total_invites: int
    active_invites: int
    deactivated_invites: int
    personalized_invites: int
    anonymous_invites: int


class InviteListResponse(BaseModel):
    event_id: str
    invites: list[Invite]
    stats: InviteStatsResponse


@router.get(EVENT_INVITES_URL, response_model=InviteListResponse, dependencies=[Depends(require_host)])
async def list_invites(
    event_id: str,
    invite_store: InviteStore = Depends(get_invite_store),
) -> InviteListResponse:
    """List an event's invites in creation order, with status counts."""
    invites = await invite_store.list_by_event(event_id)
    stats = await invite_store.stats(event_id)
    return InviteListResponse(
        event_id=event_id,
        invites=invites,
        stats=InviteStatsResponse(
            total_invites=stats.total_invites,
            active_invites=stats.active_invites,
            deactivated_invites=stats.deactivated_invites,
            personalized_invites=stats.personalized_invites,
            anonymous_invites=stats.anonymous_invites,
        ),
    )


@router.get(GET_INVITE_URL, response_model=Invite)
async def get_invite(
    invite_id: str,
    invite_store: InviteStore = Depends(get_invite_store),
) -> Invite:
    """Look up an invite by id, e.g. when a guest opens their RSVP link."""
    try:
        return await invite_store.get(invite_id)
    except RSVPEngineError as e:
        raise to_http_exception(e) from e
