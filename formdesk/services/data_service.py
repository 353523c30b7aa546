"""
Data service - the façade the CLI and login flow consume.

Decides between serving cache immediately (and refreshing in the
background) and blocking on a fresh fetch, and reconciles fetch failures
against whatever cache exists. Nothing raised inside the pipeline escapes
this module: every outcome is a LoadResult.

States:
    initialize():  Idle → CacheHit (cached data + detached refresh)
                        → CacheMiss (await fetch_fresh)
    fetch_fresh(): Fetching → Success
                            → FailureWithFallback (any cache entry, stale or not)
                            → FailureNoFallback (empty data + error)
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from formdesk.errors import StoreError
from formdesk.ingestion.aggregator import SourceAggregator
from formdesk.ingestion.normalizer import normalize_records
from formdesk.ingestion.schemas import Submission
from formdesk.storage.cache import SubmissionCache

logger = structlog.get_logger(__name__)

FALLBACK_ERROR = "Failed to fetch fresh data. Showing cached data."


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


@dataclass
class LoadResult:
    """
    What a caller gets back from the data service.

    Rendering rule: ``data`` plus a non-null ``error`` is a warning; empty
    ``data`` plus an error is a full error state.
    """

    data: list[Submission] = field(default_factory=list)
    error: str | None = None
    timestamp: datetime = field(default_factory=_utc_now)
    is_cached: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_warning(self) -> bool:
        return self.error is not None and bool(self.data)

    @property
    def is_fatal(self) -> bool:
        return self.error is not None and not self.data


RefreshListener = Callable[[LoadResult], Awaitable[None] | None]


class DataService:
    """
    Orchestrates aggregator → normalizer → cache.

    No in-flight coalescing: concurrent calls each run their own pipeline,
    and the cache slot is last-writer-wins.

    Usage:
        service = DataService(aggregator, SubmissionCache(store))
        service.add_refresh_listener(on_refresh)
        result = await service.initialize()
    """

    def __init__(
        self,
        aggregator: SourceAggregator,
        cache: SubmissionCache,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._aggregator = aggregator
        self._cache = cache
        self._clock = clock
        self._listeners: list[RefreshListener] = []
        self._pending_refreshes: set[asyncio.Task[LoadResult]] = set()
        self._latest_refresh: asyncio.Task[LoadResult] | None = None

    @property
    def cache(self) -> SubmissionCache:
        return self._cache

    def add_refresh_listener(self, listener: RefreshListener) -> None:
        """Register a callback for background refresh results (sync or async)."""
        self._listeners.append(listener)

    def remove_refresh_listener(self, listener: RefreshListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def pending_refreshes(self) -> set[asyncio.Task[LoadResult]]:
        """Background refreshes that have not finished yet."""
        return set(self._pending_refreshes)

    async def wait_for_refresh(self) -> LoadResult | None:
        """
        Await every pending background refresh.

        Returns the result of the most recently scheduled refresh, or None
        if none was ever scheduled.
        """
        while self._pending_refreshes:
            await asyncio.gather(*list(self._pending_refreshes))
        if self._latest_refresh is None:
            return None
        return self._latest_refresh.result()

    async def initialize(self) -> LoadResult:
        """
        Load submissions for a newly established session.

        With a fresh cache entry this returns without touching the network
        and schedules a background refresh; otherwise it blocks on
        ``fetch_fresh()``.
        """
        cached = await self._cache.read()
        if cached is not None:
            logger.info(
                "Serving cached submissions, refreshing in background",
                submissions=len(cached.data),
            )
            task = asyncio.create_task(
                self._background_refresh(), name="formdesk-background-refresh"
            )
            self._pending_refreshes.add(task)
            task.add_done_callback(self._pending_refreshes.discard)
            self._latest_refresh = task
            return LoadResult(
                data=list(cached.data),
                error=None,
                timestamp=_from_epoch_ms(cached.timestamp),
                is_cached=True,
            )

        result = await self.fetch_fresh()
        result.is_cached = False
        return result

    async def fetch_fresh(self) -> LoadResult:
        """Run the full pipeline, degrading to any existing cache entry on failure."""
        try:
            records = await self._aggregator.fetch_all()
            submissions = normalize_records(
                records, self._aggregator.registry, clock=self._clock
            )
        except Exception as e:
            return await self._fallback(e)

        try:
            await self._cache.write(submissions)
        except StoreError as e:
            logger.warning("Failed to update submissions cache", error=str(e))

        logger.info("Fetched fresh submissions", submissions=len(submissions))
        return LoadResult(data=submissions, error=None, timestamp=self._clock())

    async def _fallback(self, exc: Exception) -> LoadResult:
        # Any entry qualifies here, stale or not
        cached = await self._cache.read_any()
        if cached is not None:
            logger.warning(
                "Fresh fetch failed, serving cached submissions",
                error=str(exc),
                submissions=len(cached.data),
            )
            return LoadResult(
                data=list(cached.data),
                error=FALLBACK_ERROR,
                timestamp=_from_epoch_ms(cached.timestamp),
            )

        logger.error("Fresh fetch failed with no cache to fall back on", error=str(exc))
        return LoadResult(
            data=[],
            error=str(exc) or type(exc).__name__,
            timestamp=self._clock(),
        )

    async def _background_refresh(self) -> LoadResult:
        result = await self.fetch_fresh()
        for listener in list(self._listeners):
            try:
                outcome = listener(result)
                if asyncio.iscoroutine(outcome):
                    await outcome
            except Exception:
                logger.exception("Refresh listener failed")
        return result
