import datetime as dt
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


class Event(BaseModel):
    """Event context the engine reads when building dashboards."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    date: dt.date
    time: dt.time | None = None
    location: str = ""
    max_guests: int | None = None
    rsvp_deadline: dt.date | None = None
    # IANA zone name; UTC is assumed when missing or unknown
    timezone: str | None = None
    host_email: str = ""
    created_at: dt.datetime


@dataclass(frozen=True)
class EventCreateDTO:
    name: str
    date: dt.date
    time: dt.time | None = None
    location: str | None = None
    max_guests: int | None = None
    rsvp_deadline: dt.date | None = None
    timezone: str | None = None
    host_email: str | None = None
