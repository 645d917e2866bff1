"""Key-value store base: pluggable persistence for the auth state.

Learn: AuthManager doesn't care where bytes land. It needs exactly
three calls over string keys:

    get(key)         → str | None   (None = nothing stored)
    set(key, value)  → None
    remove(key)      → None         (removing a missing key is fine)

plus open()/close() so a backend can hold a connection or file handle
for the lifetime of the manager. Every backend raises StorageError
(wrapping the original exception as __cause__) when the medium fails,
so callers never need to know about redis or OSError types.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Raised when a backend cannot read, write, or remove a key."""

    def __init__(self, operation: str, key: str, reason: str = ""):
        self.operation = operation
        self.key = key
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Storage {operation} failed for key {key!r}{detail}")


class KeyValueStore(ABC):
    """Abstract async string key-value store."""

    name: str = "base"

    async def open(self) -> None:
        """Acquire underlying resources. Default: nothing to acquire."""

    async def close(self) -> None:
        """Release underlying resources. Default: nothing to release."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        ...

    async def __aenter__(self) -> "KeyValueStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
