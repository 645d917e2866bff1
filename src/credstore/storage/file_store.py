"""JSON file store: every key lives in one JSON object on disk.

Learn: The file looks like {"session": "<json text>", "registry": "<json text>"}.
Values stay opaque strings; the codec decides what's inside them.

I/O goes through aiofiles so a slow disk never blocks the event loop.
Writes are read-modify-write under one asyncio.Lock and land via a temp
file + os.replace, so a crash mid-write leaves the previous file intact.
"""

import asyncio
import json
import os
from typing import Optional

import aiofiles
import aiofiles.os
import structlog

from credstore.storage.base import KeyValueStore, StorageError

logger = structlog.get_logger()


class JsonFileStore(KeyValueStore):
    """KeyValueStore persisted as a single JSON object file."""

    name = "file"

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)
        self._write_lock = asyncio.Lock()

    async def open(self) -> None:
        directory = os.path.dirname(self.path)
        if not directory:
            return
        try:
            await aiofiles.os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise StorageError("open", self.path, str(e)) from e

    # ─── Reads ────────────────────────────────────────────

    async def get(self, key: str) -> Optional[str]:
        data = await self._read_all("get", key, strict=True)
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError("get", key, "stored value is not a string")
        return value

    async def _read_all(self, operation: str, key: str, strict: bool) -> dict:
        """Load the whole file. Missing file → empty dict.

        strict=True raises StorageError on unreadable/corrupt content;
        strict=False logs and returns {} so a write can start fresh.
        Bytes that aren't valid UTF-8 count as corrupt content.
        """
        try:
            async with aiofiles.open(self.path, "rb") as f:
                raw = await f.read()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(operation, key, str(e)) from e

        try:
            content = raw.decode("utf-8")
            if not content.strip():
                return {}
            data = json.loads(content)
            if not isinstance(data, dict):
                raise ValueError("top-level value is not an object")
        except ValueError as e:
            # UnicodeDecodeError and JSONDecodeError both land here
            if strict:
                raise StorageError(operation, key, f"corrupt store file: {e}") from e
            logger.warning(
                "storage.file_corrupt_overwritten",
                path=self.path,
                operation=operation,
                error=str(e),
            )
            return {}
        return data

    # ─── Writes ───────────────────────────────────────────

    async def set(self, key: str, value: str) -> None:
        async with self._write_lock:
            data = await self._read_all("set", key, strict=False)
            data[key] = value
            await self._write_all("set", key, data)

    async def remove(self, key: str) -> None:
        async with self._write_lock:
            data = await self._read_all("remove", key, strict=False)
            if key not in data:
                return
            del data[key]
            await self._write_all("remove", key, data)

    async def _write_all(self, operation: str, key: str, data: dict) -> None:
        tmp_path = f"{self.path}.tmp"
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, ensure_ascii=False, indent=2))
            await aiofiles.os.replace(tmp_path, self.path)
        except (OSError, UnicodeError) as e:
            logger.error(
                "storage.file_write_failed",
                path=self.path,
                operation=operation,
                key=key,
                error=str(e),
            )
            await self._discard_tmp(tmp_path)
            raise StorageError(operation, key, str(e)) from e

    async def _discard_tmp(self, tmp_path: str) -> None:
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("storage.file_tmp_cleanup_failed", path=tmp_path, error=str(e))
