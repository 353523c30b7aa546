"""Source registry with JSON file override support."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from formdesk.config.sources import DEFAULT_SOURCES
from formdesk.sources.schemas import Source

logger = logging.getLogger(__name__)


def _parse_entry(entry: dict) -> Source:
    """Convert a JSON registry entry to a Source dataclass."""
    return Source(
        name=entry["name"],
        url=entry["url"],
        expected_fields=tuple(entry.get("fields", ())),
    )


class SourceRegistry:
    """Immutable, ordered collection of sources keyed by name."""

    def __init__(self, sources: list[Source]) -> None:
        names = [s.name for s in sources]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate source names: {sorted(duplicates)}")

        self._sources = tuple(sources)
        self._by_name = {s.name: s for s in sources}

    @classmethod
    def default(cls) -> "SourceRegistry":
        return cls([_parse_entry(e) for e in DEFAULT_SOURCES])

    @classmethod
    def from_json(cls, path: Path) -> "SourceRegistry":
        """Load a registry from a JSON array of ``{name, url, fields}`` objects."""
        with open(path) as f:
            entries = json.load(f)

        registry = cls([_parse_entry(e) for e in entries])
        logger.info("Loaded %d sources from %s", len(registry), path)
        return registry

    @classmethod
    def from_settings(cls, sources_file: Path | None) -> "SourceRegistry":
        if sources_file is None:
            return cls.default()
        return cls.from_json(sources_file)

    def get(self, name: str) -> Source | None:
        return self._by_name.get(name)

    def url_for(self, name: str) -> str:
        """URL of the named source, or "" when the name is not registered."""
        source = self._by_name.get(name)
        return source.url if source else ""

    @property
    def names(self) -> list[str]:
        return [s.name for s in self._sources]

    def __iter__(self) -> Iterator[Source]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)
