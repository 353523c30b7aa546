"""
Submissions cache: one slot, one key, fixed freshness window.

``read()`` serves only fresh entries; ``read_any()`` ignores age and backs
the fetch-failure fallback. Missing, stale and unreadable entries all look
the same to ``read()`` callers.
"""

from collections.abc import Callable, Sequence
from datetime import datetime, timezone

import structlog
from pydantic import ValidationError

from formdesk.errors import StoreError
from formdesk.ingestion.schemas import CacheEntry, Submission
from formdesk.storage.kv import KeyValueStore

logger = structlog.get_logger(__name__)

CACHE_KEY = "submissions_data_cache"
CACHE_EXPIRY_MINUTES = 5


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class SubmissionCache:
    """
    Cache store for the normalized result set.

    Writes are last-writer-wins with no version check.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = CACHE_KEY,
        expiry_minutes: int = CACHE_EXPIRY_MINUTES,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._key = key
        self._expiry_ms = expiry_minutes * 60_000
        self._clock = clock

    @property
    def key(self) -> str:
        return self._key

    @property
    def expiry_ms(self) -> int:
        return self._expiry_ms

    def now_ms(self) -> int:
        return to_epoch_ms(self._clock())

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self.now_ms() - entry.timestamp < self._expiry_ms

    async def read_any(self) -> CacheEntry | None:
        """Return the stored entry regardless of age, or None."""
        try:
            payload = await self._store.get(self._key)
        except StoreError as e:
            logger.warning("Cache read failed", key=self._key, error=str(e))
            return None

        if not payload:
            return None

        try:
            return CacheEntry.model_validate_json(payload)
        except ValidationError as e:
            logger.warning(
                "Discarding unreadable cache entry",
                key=self._key,
                errors=e.error_count(),
            )
            return None

    async def read(self) -> CacheEntry | None:
        """Return the entry only if it is younger than the expiry window."""
        entry = await self.read_any()
        if entry is None:
            return None
        if not self.is_fresh(entry):
            logger.debug(
                "Cache entry expired",
                key=self._key,
                age_ms=self.now_ms() - entry.timestamp,
            )
            return None
        return entry

    async def write(self, submissions: Sequence[Submission]) -> CacheEntry:
        """
        Overwrite the slot with ``submissions`` stamped now.

        Raises:
            StoreError: If the backend rejects the write
        """
        entry = CacheEntry(data=list(submissions), timestamp=self.now_ms())
        await self._store.set(self._key, entry.to_json())
        logger.debug("Cache written", key=self._key, submissions=len(entry.data))
        return entry
