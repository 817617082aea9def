from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rsvp_engine.config.database import async_session_manager
from rsvp_engine.models.kv_entry import KeyValueEntry
from rsvp_engine.storage.base import KeyValueStore


class SqlKeyValueStore(KeyValueStore):
    """SQL implementation of the key-value contract, one row per key."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        session_factory: async_sessionmaker | None = None,
    ) -> None:
        self._session_overwrite = session_overwrite
        self._session_factory = session_factory

    def _session(self):
        return async_session_manager(
            session_overwrite=self._session_overwrite,
            session_factory=self._session_factory,
        )

    async def load(self, key: str) -> bytes | None:
        async with self._session() as session:
            result = await session.execute(
                select(KeyValueEntry.value).where(KeyValueEntry.key == key)
            )
            return result.scalar_one_or_none()

    async def save(self, key: str, value: bytes) -> None:
        # The surrounding session commits once, so the row is replaced atomically
        async with self._session() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await session.flush()
