from abc import ABC, abstractmethod

from rsvp_engine.core.clock import Clock, utc_now
from rsvp_engine.dashboard.aggregator import build_event_overview, build_report, sort_overviews
from rsvp_engine.dashboard.dtos import DashboardReport, EventOverview
from rsvp_engine.events.repository.store import EventStore
from rsvp_engine.invites.repository.store import InviteStore
from rsvp_engine.responses.repository.store import ResponseStore


class DashboardReadModel(ABC):
    @abstractmethod
    async def get_report(self, event_id: str) -> DashboardReport:
        """Build the dashboard report for an event. Raises ``NotFoundError``."""
        raise NotImplementedError

    @abstractmethod
    async def get_overview(self, host_email: str | None = None) -> list[EventOverview]:
        """Summaries for every event, or for one host's events."""
        raise NotImplementedError


class StoreDashboardReadModel(DashboardReadModel):
    """Reads snapshots from the stores and hands them to the aggregator."""

    def __init__(
        self,
        event_store: EventStore,
        invite_store: InviteStore,
        response_store: ResponseStore,
        clock: Clock = utc_now,
    ) -> None:
        self._event_store = event_store
        self._invite_store = invite_store
        self._response_store = response_store
        self._clock = clock

    async def get_report(self, event_id: str) -> DashboardReport:
        event = await self._event_store.get(event_id)
        invites = await self._invite_store.list_by_event(event.id)
        responses = await self._response_store.list_by_event(event.id)
        return build_report(event, invites, responses, now=self._clock())

    async def get_overview(self, host_email: str | None = None) -> list[EventOverview]:
        overviews = []
        for event in await self._event_store.list_events(host_email):
            invites = await self._invite_store.list_by_event(event.id)
            responses = await self._response_store.list_by_event(event.id)
            overviews.append(build_event_overview(event, invites, responses))
        return sort_overviews(overviews)
