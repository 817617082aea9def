"""Response store - validates, normalizes and persists RSVP responses."""

import csv
import io
import json
import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import lru_cache

from rsvp_engine.core.clock import Clock, utc_now
from rsvp_engine.core.collections import EventCollection
from rsvp_engine.core.enums import Attendance
from rsvp_engine.core.ids import new_id
from rsvp_engine.core.normalization import (
    clean_text,
    normalize_attendance,
    normalize_dietary_options,
    normalize_guest_count,
)
from rsvp_engine.errors import NotFoundError, ValidationError
from rsvp_engine.invites.repository.store import InviteStore, get_invite_store
from rsvp_engine.responses.dtos import (
    ExportFormat,
    FilteredResponsesDTO,
    Response,
    ResponseFilters,
    ResponseSubmissionDTO,
    SortField,
)
from rsvp_engine.storage import get_key_value_store
from rsvp_engine.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

RESPONSES_KEY = "event:{event_id}:responses"
ATTENDANCE_FILTERS = {"all"} | {attendance.value for attendance in Attendance}
SORT_KEYS = {
    SortField.SUBMITTED_AT: lambda r: (r.submitted_at, r.id),
    SortField.GUEST_NAME: lambda r: (r.guest_name.lower(), r.id),
    SortField.GUEST_COUNT: lambda r: (r.guest_count, r.id),
}
EXPORT_COLUMNS = (
    "id",
    "event_id",
    "invite_id",
    "guest_name",
    "guest_email",
    "attendance",
    "guest_count",
    "dietary_options",
    "dietary_restrictions",
    "message",
    "submitted_at",
)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class ResponseStore(ABC):
    @abstractmethod
    async def submit(self, submission: ResponseSubmissionDTO) -> Response:
        """Store a guest's RSVP, replacing an earlier one for the same invite."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_event(self, event_id: str) -> list[Response]:
        """Return the event's responses ordered by ``submitted_at`` then ``id``."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, event_id: str, response_id: str) -> Response:
        raise NotImplementedError

    async def filter(self, event_id: str, filters: ResponseFilters) -> FilteredResponsesDTO:
        attendance = clean_text(filters.attendance).lower() or "all"
        if attendance not in ATTENDANCE_FILTERS:
            raise ValidationError("attendance", f"Unknown attendance filter '{filters.attendance}'")
        try:
            sort_field = SortField(clean_text(filters.sort_by) or SortField.SUBMITTED_AT.value)
        except ValueError:
            raise ValidationError("sort_by", f"Unknown sort field '{filters.sort_by}'") from None

        responses = await self.list_by_event(event_id)
        original_count = len(responses)

        search = clean_text(filters.search).lower()
        if search:
            responses = [
                response
                for response in responses
                if search in response.guest_name.lower() or search in response.guest_email.lower()
            ]

        if attendance != "all":
            responses = [r for r in responses if r.attendance.value == attendance]

        wanted_tags = {tag.lower() for tag in normalize_dietary_options(filters.dietary_options)}
        if wanted_tags:
            responses = [
                r
                for r in responses
                if wanted_tags & {tag.lower() for tag in r.dietary_options}
            ]

        if filters.min_guests is not None:
            responses = [r for r in responses if r.guest_count >= filters.min_guests]
        if filters.max_guests is not None:
            responses = [r for r in responses if r.guest_count <= filters.max_guests]
        if filters.submitted_from is not None:
            submitted_from = _as_utc(filters.submitted_from)
            responses = [r for r in responses if _as_utc(r.submitted_at) >= submitted_from]
        if filters.submitted_to is not None:
            submitted_to = _as_utc(filters.submitted_to)
            responses = [r for r in responses if _as_utc(r.submitted_at) <= submitted_to]

        responses = sorted(responses, key=SORT_KEYS[sort_field], reverse=filters.descending)

        return FilteredResponsesDTO(
            responses=responses,
            total_count=len(responses),
            original_count=original_count,
        )

    async def export(self, event_id: str, export_format: str = ExportFormat.CSV.value) -> str:
        """Render the event's responses as CSV or JSON, in submission order.

        CSV always carries a header row; dietary options are joined with
        ``"; "``. JSON is a list of response objects.
        """
        try:
            export_format = ExportFormat(clean_text(export_format).lower() or ExportFormat.CSV.value)
        except ValueError:
            raise ValidationError("format", f"Unknown export format '{export_format}'") from None

        responses = await self.list_by_event(event_id)
        if export_format == ExportFormat.JSON:
            return json.dumps([r.model_dump(mode="json") for r in responses], indent=2)

        output = io.StringIO()
        writer = csv.DictWriter(output, EXPORT_COLUMNS, extrasaction="ignore", lineterminator="\n")
        writer.writeheader()
        for response in responses:
            row = response.model_dump(mode="json")
            row["invite_id"] = row["invite_id"] or ""
            row["dietary_options"] = "; ".join(response.dietary_options)
            writer.writerow(row)
        return output.getvalue()


class KeyValueResponseStore(ResponseStore):
    """Response store persisted under ``event:{id}:responses``."""

    def __init__(self, kv: KeyValueStore, invite_store: InviteStore, clock: Clock = utc_now) -> None:
        self._responses = EventCollection(kv, Response, RESPONSES_KEY)
        self._invite_store = invite_store
        self._clock = clock

    async def submit(self, submission: ResponseSubmissionDTO) -> Response:
        event_id = clean_text(submission.event_id)
        guest_name = clean_text(submission.guest_name)
        guest_email = clean_text(submission.guest_email)
        if not event_id:
            raise ValidationError("event_id", "Event ID is required")
        if not guest_name:
            raise ValidationError("guest_name", "Guest name is required")
        if not guest_email:
            raise ValidationError("guest_email", "Guest email is required")

        attendance = normalize_attendance(submission.attendance)
        if attendance is None:
            raise ValidationError("attendance", "Attendance must be one of yes, no or maybe")

        invite_id = clean_text(submission.invite_id) or None

        async with self._responses.lock(event_id):
            unmatched_invite = False
            if invite_id is not None:
                unmatched_invite = not await self._invite_belongs_to(invite_id, event_id)
                if unmatched_invite:
                    logger.warning(
                        "Response for event %s references unknown invite %s", event_id, invite_id
                    )

            responses = await self._responses.read(event_id)
            existing_position = None
            if invite_id is not None:
                for position, current in enumerate(responses):
                    if current.invite_id == invite_id:
                        existing_position = position
                        break

            response_id = (
                responses[existing_position].id if existing_position is not None else new_id("response")
            )
            response = Response(
                id=response_id,
                event_id=event_id,
                invite_id=invite_id,
                guest_name=guest_name,
                guest_email=guest_email,
                attendance=attendance,
                guest_count=normalize_guest_count(submission.guest_count),
                dietary_options=normalize_dietary_options(submission.dietary_options),
                dietary_restrictions=clean_text(submission.dietary_restrictions),
                message=clean_text(submission.message),
                submitted_at=self._clock(),
                unmatched_invite=unmatched_invite,
            )

            if existing_position is not None:
                responses[existing_position] = response
            else:
                responses.append(response)
            await self._responses.write(event_id, responses)

        if existing_position is not None:
            logger.info("Overwrote response %s for invite %s", response.id, invite_id)
        else:
            logger.info("Stored response %s for event %s", response.id, event_id)
        return response

    async def list_by_event(self, event_id: str) -> list[Response]:
        responses = await self._responses.read(clean_text(event_id))
        return sorted(responses, key=lambda r: (r.submitted_at, r.id))

    async def get(self, event_id: str, response_id: str) -> Response:
        for response in await self._responses.read(clean_text(event_id)):
            if response.id == response_id:
                return response
        raise NotFoundError("response", response_id)

    async def _invite_belongs_to(self, invite_id: str, event_id: str) -> bool:
        try:
            invite = await self._invite_store.get(invite_id)
        except NotFoundError:
            return False
        return invite.event_id == event_id


@lru_cache
def get_response_store() -> ResponseStore:
    return KeyValueResponseStore(get_key_value_store(), invite_store=get_invite_store())
