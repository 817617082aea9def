import asyncio
import json
import logging
from abc import ABC, abstractmethod
from functools import lru_cache

from rsvp_engine.core.clock import Clock, utc_now
from rsvp_engine.core.ids import new_id
from rsvp_engine.core.normalization import clean_text
from rsvp_engine.errors import NotFoundError, ValidationError
from rsvp_engine.events.dtos import Event, EventCreateDTO
from rsvp_engine.storage import get_key_value_store
from rsvp_engine.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

EVENT_KEY = "event:{event_id}"
EVENT_INDEX_KEY = "events"


class EventStore(ABC):
    @abstractmethod
    async def create(self, event: EventCreateDTO) -> Event:
        raise NotImplementedError

    @abstractmethod
    async def get(self, event_id: str) -> Event:
        """Return the event or raise ``NotFoundError``."""
        raise NotImplementedError

    @abstractmethod
    async def list_events(self, host_email: str | None = None) -> list[Event]:
        """Return registered events, optionally only those of one host."""
        raise NotImplementedError


class KeyValueEventStore(EventStore):
    """Events live under ``event:{id}``; ``events`` holds the list of ids."""

    def __init__(self, kv: KeyValueStore, clock: Clock = utc_now) -> None:
        self._kv = kv
        self._clock = clock
        self._index_lock = asyncio.Lock()

    async def create(self, event: EventCreateDTO) -> Event:
        name = clean_text(event.name)
        if not name:
            raise ValidationError("name", "Event name is required")
        if event.max_guests is not None and event.max_guests < 1:
            raise ValidationError("max_guests", "Maximum guests must be at least 1")

        created = Event(
            id=new_id("event"),
            name=name,
            date=event.date,
            time=event.time,
            location=clean_text(event.location),
            max_guests=event.max_guests,
            rsvp_deadline=event.rsvp_deadline,
            timezone=clean_text(event.timezone) or None,
            host_email=clean_text(event.host_email),
            created_at=self._clock(),
        )
        payload = json.dumps(created.model_dump(mode="json")).encode("utf-8")
        await self._kv.save(EVENT_KEY.format(event_id=created.id), payload)

        async with self._index_lock:
            event_ids = await self._load_index()
            await self._kv.save(EVENT_INDEX_KEY, json.dumps(event_ids + [created.id]).encode("utf-8"))

        logger.info("Created event %s (%s)", created.id, created.name)
        return created

    async def get(self, event_id: str) -> Event:
        event_id = clean_text(event_id)
        raw = await self._kv.load(EVENT_KEY.format(event_id=event_id)) if event_id else None
        if raw is None:
            raise NotFoundError("event", event_id)
        return Event.model_validate_json(raw)

    async def list_events(self, host_email: str | None = None) -> list[Event]:
        host_email = clean_text(host_email).lower()
        events = []
        for event_id in await self._load_index():
            try:
                event = await self.get(event_id)
            except NotFoundError:
                logger.warning("Event index references missing event %s", event_id)
                continue
            if host_email and event.host_email.lower() != host_email:
                continue
            events.append(event)
        return events

    async def _load_index(self) -> list[str]:
        raw = await self._kv.load(EVENT_INDEX_KEY)
        if not raw:
            return []
        try:
            event_ids = json.loads(raw)
        except ValueError:
            logger.error("Discarding unreadable event index")
            return []
        if not isinstance(event_ids, list):
            return []
        return [event_id for event_id in event_ids if isinstance(event_id, str)]


@lru_cache
def get_event_store() -> EventStore:
    return KeyValueEventStore(get_key_value_store())
