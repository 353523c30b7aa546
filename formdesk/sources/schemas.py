"""Data models for the sources module."""

from dataclasses import dataclass, field
from typing import Any

# One row as returned by a source endpoint, tagged with ``_source`` and ``_fields``.
RawRecord = dict[str, Any]


@dataclass(frozen=True)
class Source:
    """A registered form endpoint.

    ``name`` is unique across the registry and is what submissions carry
    as their ``sourceSite``.
    """

    name: str
    url: str
    expected_fields: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class SourceOutcome:
    """Result of fetching a single source.

    ``error`` is set when the fetch failed; ``records`` is then empty.
    """

    source: Source
    records: list[RawRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
