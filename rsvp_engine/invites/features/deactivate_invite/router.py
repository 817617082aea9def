from fastapi import APIRouter, Depends

from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.invites.dtos import Invite
from rsvp_engine.invites.repository.store import InviteStore, get_invite_store
from rsvp_engine.invites.urls import DEACTIVATE_INVITE_URL
from rsvp_engine.routers.auth import require_host
from rsvp_engine.routers.errors import to_http_exception

router = APIRouter()


@router.post(DEACTIVATE_INVITE_URL, response_model=Invite, dependencies=[Depends(require_host)])
async def deactivate_invite(
    invite_id: str,
    invite_store: InviteStore = Depends(get_invite_store),
) -> Invite:
    """
    Deactivate an invite. Responses already submitted for it stay valid.
    Deactivating twice returns the invite unchanged.
    """
    try:
        return await invite_store.deactivate(invite_id)
    except RSVPEngineError as e:
        raise to_http_exception(e) from e
