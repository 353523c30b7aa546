"""
Single-source fetcher.

Fetches one Apps Script endpoint and tags every returned row with the
owning source. A failing source never raises to the caller: the failure
is logged and the source contributes no records.
"""

from typing import Any

import structlog

from formdesk.ingestion.http_client import HTTPClient
from formdesk.sources.schemas import RawRecord, Source, SourceOutcome

logger = structlog.get_logger(__name__)


class SourceFetcher:
    """
    Fetches and tags records for one source at a time.

    Usage:
        async with HTTPClient() as client:
            fetcher = SourceFetcher(client)
            records = await fetcher.fetch(source)
    """

    def __init__(self, client: HTTPClient):
        self._client = client

    async def fetch(self, source: Source) -> list[RawRecord]:
        """Fetch one source; returns an empty list on any failure."""
        outcome = await self.fetch_outcome(source)
        return outcome.records

    async def fetch_outcome(self, source: Source) -> SourceOutcome:
        """
        Fetch one source and report whether it succeeded.

        Never raises: network errors, non-2xx statuses, unparseable bodies
        and non-array payloads all produce an outcome with ``error`` set.
        """
        try:
            response = await self._client.get(source.url)
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError(
                    f"Expected a JSON array, got {type(payload).__name__}"
                )
        except Exception as e:
            logger.error(
                "Error fetching data from source",
                source=source.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return SourceOutcome(source=source, error=str(e) or type(e).__name__)

        records = _tag_records(payload, source)
        logger.debug("Fetched source", source=source.name, records=len(records))
        return SourceOutcome(source=source, records=records)


def _tag_records(rows: list[Any], source: Source) -> list[RawRecord]:
    """Copy each row and add ``_source`` and ``_fields``. Non-object rows are skipped."""
    records: list[RawRecord] = []
    for row in rows:
        if not isinstance(row, dict):
            logger.debug("Skipping non-object row", source=source.name)
            continue
        records.append(
            {
                **row,
                "_source": source.name,
                "_fields": list(source.expected_fields),
            }
        )
    return records
