from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from rsvp_engine.core.enums import Attendance
from rsvp_engine.core.normalization import normalize_dietary_options, normalize_guest_count


class SortField(str, Enum):
    SUBMITTED_AT = "submitted_at"
    GUEST_NAME = "guest_name"
    GUEST_COUNT = "guest_count"


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


class Response(BaseModel):
    """A stored RSVP response."""

    model_config = ConfigDict(frozen=True)

    id: str
    event_id: str
    invite_id: str | None = None
    guest_name: str
    guest_email: str
    attendance: Attendance
    guest_count: int = 1
    dietary_options: list[str] = []
    dietary_restrictions: str = ""
    message: str = ""
    submitted_at: datetime
    # Set when invite_id does not resolve to an invite of this event
    unmatched_invite: bool = False

    # Records written by older versions may carry loose values
    @field_validator("guest_count", mode="before")
    @classmethod
    def _coerce_guest_count(cls, value: Any) -> int:
        return normalize_guest_count(value)

    @field_validator("dietary_options", mode="before")
    @classmethod
    def _coerce_dietary_options(cls, value: Any) -> list[str]:
        return normalize_dietary_options(value)


@dataclass(frozen=True)
class ResponseSubmissionDTO:
    """Raw guest input for an RSVP. Values are normalized by the store."""

    event_id: str
    guest_name: str
    guest_email: str
    attendance: Any
    invite_id: str | None = None
    guest_count: Any = None
    dietary_options: Any = None
    dietary_restrictions: str | None = None
    message: str | None = None
    # Ignored; the store stamps submitted_at itself
    submitted_at: Any = None


@dataclass(frozen=True)
class ResponseFilters:
    search: str | None = None
    attendance: str = "all"
    sort_by: str = SortField.SUBMITTED_AT.value
    descending: bool = False
    dietary_options: list[str] = field(default_factory=list)
    min_guests: int | None = None
    max_guests: int | None = None
    submitted_from: datetime | None = None
    submitted_to: datetime | None = None


@dataclass(frozen=True)
class FilteredResponsesDTO:
    responses: list[Response]
    total_count: int
    original_count: int
