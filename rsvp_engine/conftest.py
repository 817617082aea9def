from contextlib import asynccontextmanager
from datetime import UTC, date, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from rsvp_engine.events.dtos import EventCreateDTO
from rsvp_engine.events.repository.store import KeyValueEventStore, get_event_store
from rsvp_engine.invites.hosting import get_hosting_link_resolver
from rsvp_engine.invites.hosting.publisher import DisabledPublisher
from rsvp_engine.invites.hosting.resolver import HostingLinkResolver
from rsvp_engine.invites.repository.store import KeyValueInviteStore, get_invite_store
from rsvp_engine.main import app
from rsvp_engine.responses.repository.store import KeyValueResponseStore, get_response_store
from rsvp_engine.storage import MemoryKeyValueStore, get_key_value_store


class StepClock:
    """Clock that advances by a fixed step on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


@pytest.fixture
def clock():
    return StepClock(datetime(2026, 5, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def link_resolver():
    return HostingLinkResolver(publisher=DisabledPublisher(), url_builder=lambda e, i: f"http://test/rsvp/{e}/{i}")


@pytest.fixture
def event_store(kv, clock):
    return KeyValueEventStore(kv, clock=clock)


@pytest.fixture
def invite_store(kv, clock):
    return KeyValueInviteStore(kv, max_batch_size=100, clock=clock)


@pytest.fixture
def response_store(kv, invite_store, clock):
    return KeyValueResponseStore(kv, invite_store=invite_store, clock=clock)


@pytest.fixture
async def event(event_store):
    return await event_store.create(EventCreateDTO(name="Summer Party", date=date(2026, 6, 1)))


@pytest.fixture
def store_overrides(kv, event_store, invite_store, response_store, link_resolver):
    """Dependency overrides that point every router at the in-memory stores."""
    return {
        get_key_value_store: lambda: kv,
        get_event_store: lambda: event_store,
        get_invite_store: lambda: invite_store,
        get_response_store: lambda: response_store,
        get_hosting_link_resolver: lambda: link_resolver,
    }


@pytest.fixture
def client_factory():
    @asynccontextmanager
    async def _client_factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return _client_factory


@pytest.fixture
async def client(client_factory, store_overrides):
    async with client_factory(store_overrides) as ac:
        yield ac
