from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from rsvp_engine.core.enums import HostingMethod, InviteStatus


class Invite(BaseModel):
    """A single issued RSVP opportunity for an event."""

    model_config = ConfigDict(frozen=True)

    id: str
    event_id: str
    guest_name: str = ""
    guest_email: str = ""
    personal_message: str = ""
    rsvp_url: str
    hosting_method: HostingMethod
    status: InviteStatus = InviteStatus.ACTIVE
    created_at: datetime
    deactivated_at: datetime | None = None

    @property
    def is_personalized(self) -> bool:
        return bool(self.guest_name or self.guest_email)


@dataclass(frozen=True)
class GuestRowDTO:
    """One row of a personalized guest list. Blank values are allowed."""

    name: str | None = None
    email: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class ResolvedLinkDTO:
    rsvp_url: str
    hosting_method: HostingMethod


@dataclass(frozen=True)
class InviteStatsDTO:
    event_id: str
    total_invites: int
    active_invites: int
    deactivated_invites: int
    personalized_invites: int
    anonymous_invites: int
