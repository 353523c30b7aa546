"""Pytest fixtures for formdesk tests."""

from datetime import datetime, timedelta, timezone

import pytest

from formdesk.config.settings import Settings
from formdesk.sources.registry import SourceRegistry
from formdesk.sources.schemas import Source
from formdesk.storage.kv import MemoryStore

SUBSCRIPTION_SOURCE = "Email Subscription List - Professional Edge Global"
CONTACT_SOURCE = "Contact Form Submission - S. Suresh & Associates"
CLAIM_SOURCE = "Claim Form Submission - Everest Claims and Advisory"

SUBSCRIPTION_URL = "https://sheets.example.com/subscriptions"
CONTACT_URL = "https://sheets.example.com/contact"
CLAIM_URL = "https://sheets.example.com/claims"


class FrozenClock:
    """Manually advanced clock for deterministic time-based tests."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        cache_backend="file",
        state_dir=tmp_path / "state",
        admin_users_file=tmp_path / "admin_users.json",
        max_http_retries=0,
    )


@pytest.fixture
def registry() -> SourceRegistry:
    return SourceRegistry([
        Source(SUBSCRIPTION_SOURCE, SUBSCRIPTION_URL, ("email", "timestamp")),
        Source(CONTACT_SOURCE, CONTACT_URL, ("name", "email", "subject", "message")),
        Source(CLAIM_SOURCE, CLAIM_URL, ("name", "email", "message")),
    ])


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def subscription_rows() -> list[dict]:
    return [
        {"email": "anita@example.com", "timestamp": "2025-03-01T08:15:00.000Z"},
        {"email": "ravi@globex.com.np", "timestamp": "2025-03-02T10:00:00.000Z"},
    ]


@pytest.fixture
def contact_rows() -> list[dict]:
    return [
        {
            "name": "Sita Sharma",
            "email": "sita@acme.com.np",
            "subject": "Audit engagement",
            "message": "Please call me back about the annual audit.",
            "timestamp": "2025-03-05T14:45:00.000Z",
        },
    ]
