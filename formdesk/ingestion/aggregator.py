"""
Concurrent aggregation across all registered sources.

Every source is fetched at once under ``asyncio.gather`` so the wall-clock
cost of a pass is that of the slowest source. Results are concatenated in
registry order.
"""

import asyncio
import time
from collections.abc import Callable

import structlog

from formdesk.errors import AllSourcesFailedError
from formdesk.ingestion.fetcher import SourceFetcher
from formdesk.ingestion.http_client import HTTPClient
from formdesk.sources.registry import SourceRegistry
from formdesk.sources.schemas import RawRecord, SourceOutcome

logger = structlog.get_logger(__name__)


class SourceAggregator:
    """
    Fetches all sources concurrently and flattens their records.

    A single failing source only removes its own contribution. When the
    registry is non-empty and every source fails, the pass is treated as
    a pipeline failure and AllSourcesFailedError is raised.

    Usage:
        aggregator = SourceAggregator(registry, lambda: HTTPClient.from_settings(settings))
        records = await aggregator.fetch_all()
    """

    def __init__(
        self,
        registry: SourceRegistry,
        client_factory: Callable[[], HTTPClient] = HTTPClient,
    ):
        self._registry = registry
        self._client_factory = client_factory
        self._last_outcomes: list[SourceOutcome] = []

    @property
    def registry(self) -> SourceRegistry:
        return self._registry

    @property
    def last_outcomes(self) -> list[SourceOutcome]:
        """Per-source outcomes of the most recent pass."""
        return list(self._last_outcomes)

    async def fetch_outcomes(self) -> list[SourceOutcome]:
        """Fetch every source concurrently; one outcome per source in registry order."""
        async with self._client_factory() as client:
            fetcher = SourceFetcher(client)
            outcomes = await asyncio.gather(
                *(fetcher.fetch_outcome(source) for source in self._registry)
            )
        self._last_outcomes = list(outcomes)
        return self._last_outcomes

    async def fetch_all(self) -> list[RawRecord]:
        """
        Fetch and concatenate records from all sources.

        Raises:
            AllSourcesFailedError: If the registry is non-empty and no source succeeded
        """
        start_time = time.monotonic()
        outcomes = await self.fetch_outcomes()

        failed = [o.source.name for o in outcomes if not o.ok]
        records = [record for o in outcomes for record in o.records]

        logger.info(
            "Aggregation completed",
            sources=len(outcomes),
            failed=len(failed),
            records=len(records),
            elapsed_seconds=round(time.monotonic() - start_time, 2),
        )

        if outcomes and len(failed) == len(outcomes):
            raise AllSourcesFailedError(failed)

        return records
