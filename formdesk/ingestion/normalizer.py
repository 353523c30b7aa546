"""
Raw record → Submission normalization.

Sources disagree on column names (contact forms carry ``company`` where
others carry ``subject``; subscription sheets carry only ``email`` and
``timestamp``). This module folds them all into the canonical schema with
fixed human-readable fallbacks.
"""

import math
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from formdesk.ingestion.schemas import Submission, SubmissionType
from formdesk.sources.registry import SourceRegistry
from formdesk.sources.schemas import RawRecord

# Case-sensitive markers in a source name that mark it as a subscription list
SUBSCRIPTION_MARKERS: tuple[str, ...] = ("Subscription", "Consultation")

FALLBACK_NAME = "Not provided"
FALLBACK_EMAIL = "No email"
FALLBACK_SUBJECT = "No subject"
FALLBACK_MESSAGE = "No message provided"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def classify_source(source_name: str) -> SubmissionType:
    """Subscription if the name contains any marker, otherwise contact."""
    if any(marker in source_name for marker in SUBSCRIPTION_MARKERS):
        return SubmissionType.SUBSCRIPTION
    return SubmissionType.CONTACT


def _text(value: Any) -> str | None:
    """
    Stringify a cell, or None when the cell is falsy.

    Falsy follows the sheets' JSON: missing, null, "", 0, false and NaN
    count as absent. Whitespace-only strings are kept as they are.
    """
    if value is None or value is False or value == "":
        return None
    if isinstance(value, bool):
        return "true"
    if isinstance(value, (int, float)) and (value == 0 or math.isnan(value)):
        return None
    return str(value)


def _first(record: RawRecord, *keys: str) -> str | None:
    for key in keys:
        text = _text(record.get(key))
        if text is not None:
            return text
    return None


def normalize_record(
    record: RawRecord,
    position: int,
    registry: SourceRegistry,
    fetched_at: str,
) -> Submission:
    """Map one raw record at 0-based ``position`` to a Submission."""
    source_name = str(record.get("_source", ""))
    return Submission(
        id=str(position + 1),
        source_site=source_name,
        source_url=registry.url_for(source_name),
        type=classify_source(source_name),
        submitted_at=_first(record, "timestamp") or fetched_at,
        name=_first(record, "name") or FALLBACK_NAME,
        email=_first(record, "email") or FALLBACK_EMAIL,
        subject=_first(record, "subject", "company") or FALLBACK_SUBJECT,
        message=_first(record, "message") or FALLBACK_MESSAGE,
        # No feed carries an unsubscribe signal
        subscribed=True,
    )


def normalize_records(
    records: Sequence[RawRecord],
    registry: SourceRegistry,
    clock: Callable[[], datetime] = _utc_now,
) -> list[Submission]:
    """
    Normalize a raw record sequence.

    Deterministic for a fixed clock: ids are exactly "1".."n" in input
    order. Records without a timestamp share one fetch time.
    """
    fetched_at = clock().isoformat()
    return [
        normalize_record(record, i, registry, fetched_at)
        for i, record in enumerate(records)
    ]
