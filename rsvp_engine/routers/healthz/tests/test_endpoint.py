import pytest

from rsvp_engine.storage import MemoryKeyValueStore, ResilientKeyValueStore, get_key_value_store
from rsvp_engine.storage.base import KeyValueStore


class DownStore(KeyValueStore):
    async def load(self, key):
        raise ConnectionError("down")

    async def save(self, key, value):
        raise ConnectionError("down")


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/healthz/")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_health_check_reports_degraded_persistence(client_factory):
    store = ResilientKeyValueStore(DownStore())
    await store.load("anything")

    async with client_factory({get_key_value_store: lambda: store}) as client:
        response = await client.get("/healthz/")

    assert response.json() == {"status": "degraded", "persistence": "memory", "version": "0.1.0"}


@pytest.mark.asyncio
async def test_health_check_with_durable_store(client_factory):
    store = ResilientKeyValueStore(MemoryKeyValueStore())

    async with client_factory({get_key_value_store: lambda: store}) as client:
        response = await client.get("/healthz/")

    assert response.json()["persistence"] == "durable"


@pytest.mark.asyncio
async def test_root_endpoint(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to the RSVP Engine API"
