import logging

from tenacity import AsyncRetrying, before_sleep_log, stop_after_attempt

from rsvp_engine.errors import DependencyUnavailableError
from rsvp_engine.storage.base import KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)


class ResilientKeyValueStore(KeyValueStore):
    """Wraps a backend with one retry and an in-memory fallback.

    Each call is attempted twice. If both attempts fail the store either
    raises ``DependencyUnavailableError`` (``required=True``) or switches to
    in-memory mode for the rest of the process, logging a single warning.
    """

    def __init__(self, backend: KeyValueStore, required: bool = False) -> None:
        self._backend = backend
        self._required = required
        self._fallback = MemoryKeyValueStore()
        self._degraded = False

    @property
    def degraded(self) -> bool:
        return self._degraded

    async def load(self, key: str) -> bytes | None:
        if self._degraded:
            return await self._fallback.load(key)
        try:
            return await self._attempt_twice(self._backend.load, key)
        except DependencyUnavailableError:
            if self._required:
                raise
            self._degrade()
            return await self._fallback.load(key)

    async def save(self, key: str, value: bytes) -> None:
        if self._degraded:
            await self._fallback.save(key, value)
            return
        try:
            await self._attempt_twice(self._backend.save, key, value)
        except DependencyUnavailableError:
            if self._required:
                raise
            self._degrade()
            await self._fallback.save(key, value)

    async def _attempt_twice(self, call, *args):
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(2),
                before_sleep=before_sleep_log(logger, logging.INFO),
                reraise=True,
            ):
                with attempt:
                    return await call(*args)
        except Exception as e:
            raise DependencyUnavailableError("persistence", str(e)) from e

    def _degrade(self) -> None:
        if not self._degraded:
            self._degraded = True
            logger.warning(
                "Persistence is unavailable, continuing in memory only; "
                "data written from now on will be lost on restart"
            )
