from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rsvp_engine.storage import KeyValueStore, ResilientKeyValueStore, get_key_value_store

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    persistence: str
    version: str = "0.1.0"


@router.get("/", response_model=HealthCheckResponse)
async def health_check(kv: KeyValueStore = Depends(get_key_value_store)) -> HealthCheckResponse:
    """
    Health check endpoint. Reports ``degraded`` persistence once the store
    has fallen back to process memory.
    """
    if isinstance(kv, ResilientKeyValueStore) and kv.degraded:
        return HealthCheckResponse(status="degraded", persistence="memory")
    if isinstance(kv, ResilientKeyValueStore):
        return HealthCheckResponse(status="healthy", persistence="durable")
    return HealthCheckResponse(status="healthy", persistence="memory")
