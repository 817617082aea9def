import logging

import pytest

from rsvp_engine.errors import DependencyUnavailableError
from rsvp_engine.storage import MemoryKeyValueStore, ResilientKeyValueStore
from rsvp_engine.storage.base import KeyValueStore


class FlakyStore(KeyValueStore):
    """Backend that fails a fixed number of calls before recovering."""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0
        self.inner = MemoryKeyValueStore()

    async def _maybe_fail(self):
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("database is down")

    async def load(self, key: str) -> bytes | None:
        await self._maybe_fail()
        return await self.inner.load(key)

    async def save(self, key: str, value: bytes) -> None:
        await self._maybe_fail()
        await self.inner.save(key, value)


@pytest.mark.asyncio
async def test_single_failure_is_retried(caplog):
    backend = FlakyStore(failures=1)
    store = ResilientKeyValueStore(backend)

    with caplog.at_level(logging.INFO, logger="rsvp_engine.storage.resilient"):
        await store.save("k", b"v")

    assert backend.calls == 2
    assert await backend.inner.load("k") == b"v"
    assert not store.degraded
    assert any(record.message.startswith("Retrying") for record in caplog.records)


@pytest.mark.asyncio
async def test_degrades_to_memory_and_warns_once(caplog):
    backend = FlakyStore(failures=100)
    store = ResilientKeyValueStore(backend)

    with caplog.at_level(logging.WARNING, logger="rsvp_engine.storage.resilient"):
        await store.save("a", b"1")
        await store.save("b", b"2")

    assert store.degraded
    assert await store.load("a") == b"1"
    assert await store.load("b") == b"2"
    # After degrading the backend is no longer called
    assert backend.calls == 2
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1


@pytest.mark.asyncio
async def test_required_persistence_raises_dependency_unavailable():
    backend = FlakyStore(failures=100)
    store = ResilientKeyValueStore(backend, required=True)

    with pytest.raises(DependencyUnavailableError):
        await store.save("a", b"1")

    assert not store.degraded
    assert backend.calls == 2


@pytest.mark.asyncio
async def test_required_persistence_recovers_after_outage():
    backend = FlakyStore(failures=2)
    store = ResilientKeyValueStore(backend, required=True)

    with pytest.raises(DependencyUnavailableError):
        await store.load("a")
    await store.save("a", b"1")

    assert await store.load("a") == b"1"
