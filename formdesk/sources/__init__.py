"""Sources: registry of external form endpoints."""

from formdesk.sources.registry import SourceRegistry
from formdesk.sources.schemas import RawRecord, Source, SourceOutcome

__all__ = [
    "RawRecord",
    "Source",
    "SourceOutcome",
    "SourceRegistry",
]
