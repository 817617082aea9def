"""Per-event record collections persisted through the key-value contract."""

import asyncio
import json
import logging
import weakref
from typing import Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rsvp_engine.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class EventCollection(Generic[RecordT]):
    """One list of records per event, stored and rewritten as a whole.

    Callers hold ``lock(event_id)`` around read-modify-write sequences.
    ``read`` always goes to the key-value store, so writes made by other
    store instances over the same backend are never overwritten by a stale
    copy. Locks live only while someone holds or waits on them.
    """

    def __init__(self, kv: KeyValueStore, model: type[RecordT], key_template: str) -> None:
        self._kv = kv
        self._model = model
        self._key_template = key_template
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def key(self, event_id: str) -> str:
        return self._key_template.format(event_id=event_id)

    def lock(self, event_id: str) -> asyncio.Lock:
        lock = self._locks.get(event_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[event_id] = lock
        return lock

    async def read(self, event_id: str) -> list[RecordT]:
        raw = await self._kv.load(self.key(event_id))
        return self._decode(event_id, raw)

    async def write(self, event_id: str, records: list[RecordT]) -> None:
        payload = json.dumps(
            [record.model_dump(mode="json") for record in records],
            separators=(",", ":"),
        ).encode("utf-8")
        await self._kv.save(self.key(event_id), payload)

    def _decode(self, event_id: str, raw: bytes | None) -> list[RecordT]:
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError:
            logger.error("Discarding unreadable collection %s", self.key(event_id))
            return []

        records = []
        for item in items if isinstance(items, list) else []:
            try:
                records.append(self._model.model_validate(item))
            except PydanticValidationError as e:
                logger.warning(
                    "Skipping malformed %s record in %s: %s",
                    self._model.__name__,
                    self.key(event_id),
                    e,
                )
        return records
