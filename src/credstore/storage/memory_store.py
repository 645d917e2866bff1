"""In-memory store: nothing survives the process.

Used by tests and by embedders that bring their own durability.
"""

from typing import Optional

from credstore.storage.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dict-backed KeyValueStore."""

    name = "memory"

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)
