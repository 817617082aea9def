from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Byte-oriented persistence contract used by the invite and response stores."""

    @abstractmethod
    async def load(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key``, or ``None`` when absent."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        A save either fully succeeds or leaves the previous value in place.
        """
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store. Data is lost on restart."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    async def load(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def save(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def keys(self) -> list[str]:
        return sorted(self._data)
