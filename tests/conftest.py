"""Test fixtures: fresh in-memory stores and initialized managers per test.

Learn: Testing pattern for the auth core:

1. Each test gets its own MemoryStore, so there's no cross-test pollution.
2. FlakyStore wraps a MemoryStore and can be told to fail get/set/remove,
   which is how we exercise the "storage is a best-effort mirror" rules.
3. The `auth` fixture hands out an AuthManager that has already finished
   initialize(), i.e. is READY.
"""

from typing import Optional

import pytest
import pytest_asyncio
import structlog

from credstore.services.auth_manager import AuthManager
from credstore.storage.base import StorageError
from credstore.storage.memory_store import MemoryStore


class FlakyStore(MemoryStore):
    """MemoryStore whose operations can be switched to raise StorageError."""

    name = "flaky"

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.fail_get = False
        self.fail_set = False
        self.fail_remove = False
        self.fail_open = False
        self.opened = False
        self.closed = False

    async def open(self) -> None:
        if self.fail_open:
            raise StorageError("open", "flaky", "simulated open failure")
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    async def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise StorageError("get", key, "simulated read failure")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise StorageError("set", key, "simulated write failure")
        await super().set(key, value)

    async def remove(self, key: str) -> None:
        if self.fail_remove:
            raise StorageError("remove", key, "simulated remove failure")
        await super().remove(key)


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog.configure() a test (e.g. the CLI) performed."""
    yield
    structlog.reset_defaults()


@pytest.fixture()
def store() -> FlakyStore:
    return FlakyStore()


@pytest_asyncio.fixture()
async def auth(store):
    """READY AuthManager over the per-test FlakyStore."""
    manager = await AuthManager.create(store)
    try:
        yield manager
    finally:
        await manager.close()


@pytest_asyncio.fixture()
async def ann(auth):
    """Registers Ann (not logged in) and returns the manager."""
    result = await auth.signup("Ann", "ann@x.com", "secret1")
    assert result.ok
    return auth
