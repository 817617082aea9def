import gc
import json
from datetime import UTC, datetime

import pytest

from rsvp_engine.core.collections import EventCollection
from rsvp_engine.core.enums import HostingMethod
from rsvp_engine.invites.dtos import Invite
from rsvp_engine.storage import MemoryKeyValueStore
from rsvp_engine.storage.base import KeyValueStore


class FailingSaveStore(MemoryKeyValueStore):
    async def save(self, key: str, value: bytes) -> None:
        raise OSError("disk full")


def make_invite(invite_id: str) -> Invite:
    return Invite(
        id=invite_id,
        event_id="evt_1",
        rsvp_url=f"http://test/rsvp/evt_1/{invite_id}",
        hosting_method=HostingMethod.LOCAL,
        created_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.mark.asyncio
async def test_write_then_read_from_a_fresh_collection():
    kv = MemoryKeyValueStore()
    await EventCollection(kv, Invite, "event:{event_id}:invites").write("evt_1", [make_invite("inv_a")])

    records = await EventCollection(kv, Invite, "event:{event_id}:invites").read("evt_1")

    assert [record.id for record in records] == ["inv_a"]


@pytest.mark.asyncio
async def test_failed_write_leaves_stored_records_untouched():
    seeded = json.dumps([make_invite("inv_a").model_dump(mode="json")]).encode("utf-8")
    kv: KeyValueStore = FailingSaveStore({"event:evt_1:invites": seeded})
    collection = EventCollection(kv, Invite, "event:{event_id}:invites")

    with pytest.raises(OSError):
        await collection.write("evt_1", [make_invite("inv_a"), make_invite("inv_b")])

    assert [record.id for record in await collection.read("evt_1")] == ["inv_a"]


@pytest.mark.asyncio
async def test_read_sees_writes_from_another_collection():
    kv = MemoryKeyValueStore()
    first = EventCollection(kv, Invite, "event:{event_id}:invites")
    second = EventCollection(kv, Invite, "event:{event_id}:invites")
    await first.read("evt_1")

    await second.write("evt_1", [make_invite("inv_b")])

    assert [record.id for record in await first.read("evt_1")] == ["inv_b"]


def test_lock_is_shared_while_held_and_released_after():
    collection = EventCollection(MemoryKeyValueStore(), Invite, "event:{event_id}:invites")

    held = collection.lock("evt_1")
    assert collection.lock("evt_1") is held
    assert collection.lock("evt_2") is not held

    del held
    gc.collect()
    assert "evt_1" not in collection._locks


@pytest.mark.asyncio
async def test_malformed_records_are_skipped():
    good = make_invite("inv_good").model_dump(mode="json")
    kv = MemoryKeyValueStore(
        {"event:evt_1:invites": json.dumps([good, {"id": "inv_bad"}]).encode("utf-8")}
    )

    records = await EventCollection(kv, Invite, "event:{event_id}:invites").read("evt_1")

    assert [record.id for record in records] == ["inv_good"]


@pytest.mark.asyncio
async def test_unreadable_payload_reads_as_empty():
    kv = MemoryKeyValueStore({"event:evt_1:invites": b"{not json"})

    assert await EventCollection(kv, Invite, "event:{event_id}:invites").read("evt_1") == []
