"""
Key-value storage backends.

The cache and the session each occupy one reserved string key. Backends:
- MemoryStore: process-local dict (tests, one-shot runs)
- FileStore: one file per key under a state directory, surviving restarts
- RedisStore: Redis strings via redis.asyncio

All backends store opaque strings; callers own serialization. Storage is
best-effort: callers must treat reads and writes as fallible.
"""

import logging
import os
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from types import TracebackType
from typing import Protocol, runtime_checkable

import redis.asyncio as redis

from formdesk.config.settings import Settings
from formdesk.errors import StoreError

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal async string store."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-memory store backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


_SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]")


class FileStore:
    """
    Durable store with one file per key.

    Writes go to a temporary sibling and are moved into place, so a reader
    never sees a half-written value.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{_SAFE_KEY.sub('_', key)}.json"

    async def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise StoreError(f"Failed to write {path}: {e}") from e

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Failed to delete {path}: {e}") from e


class RedisStore:
    """
    Redis-backed store.

    Usage:
        async with RedisStore("redis://localhost:6379/0") as store:
            await store.set("submissions_data_cache", payload)
    """

    def __init__(self, redis_url: str, client: redis.Redis | None = None) -> None:
        self._redis_url = redis_url
        self._redis = client

    async def connect(self) -> None:
        if self._redis is None:
            self._redis = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.close()
            self._redis = None
            logger.info("Redis connection closed")

    async def __aenter__(self) -> "RedisStore":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def redis(self) -> redis.Redis:
        """Get Redis client, raising if not connected."""
        if self._redis is None:
            raise RuntimeError("Not connected to Redis. Call connect() first.")
        return self._redis

    async def get(self, key: str) -> str | None:
        try:
            return await self.redis.get(key)
        except redis.RedisError as e:
            raise StoreError(f"Redis GET {key} failed: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            await self.redis.set(key, value)
        except redis.RedisError as e:
            raise StoreError(f"Redis SET {key} failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except redis.RedisError as e:
            raise StoreError(f"Redis DEL {key} failed: {e}") from e


def create_store(settings: Settings) -> MemoryStore | FileStore | RedisStore:
    """Build the configured backend. A RedisStore still needs ``connect()``."""
    if settings.cache_backend == "memory":
        return MemoryStore()
    if settings.cache_backend == "redis":
        return RedisStore(str(settings.redis_url))
    return FileStore(settings.state_dir)


@asynccontextmanager
async def open_store(settings: Settings) -> AsyncIterator[MemoryStore | FileStore | RedisStore]:
    """Yield the configured backend, connected for the duration of the block."""
    store = create_store(settings)
    if isinstance(store, RedisStore):
        async with store:
            yield store
    else:
        yield store
