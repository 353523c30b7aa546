"""Storage layer - key-value backends and the submissions cache."""

from formdesk.storage.cache import CACHE_EXPIRY_MINUTES, CACHE_KEY, SubmissionCache
from formdesk.storage.kv import (
    FileStore,
    KeyValueStore,
    MemoryStore,
    RedisStore,
    create_store,
    open_store,
)

__all__ = [
    "CACHE_EXPIRY_MINUTES",
    "CACHE_KEY",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "SubmissionCache",
    "create_store",
    "open_store",
]
