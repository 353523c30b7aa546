"""Exception hierarchy shared across formdesk packages."""


class FormdeskError(Exception):
    """Base exception for formdesk errors."""


class AllSourcesFailedError(FormdeskError):
    """Raised when every registered source failed during one aggregation pass."""

    def __init__(self, failed_sources: list[str]):
        self.failed_sources = failed_sources
        super().__init__(
            f"Failed to fetch data from all {len(failed_sources)} sources"
        )


class StoreError(FormdeskError):
    """Raised when the key-value store cannot be read or written."""
