"""Fixtures for report tests."""

import time

import pytest

from formdesk.ingestion.schemas import Submission, SubmissionType


def make_submission(i: int, source_site: str, type_: SubmissionType, **fields) -> Submission:
    return Submission(
        id=str(i),
        source_site=source_site,
        type=type_,
        submitted_at=fields.pop("submitted_at", "2025-01-05T15:04:00Z"),
        **fields,
    )


@pytest.fixture(autouse=True)
def utc_local_zone(monkeypatch):
    """Dates render in local time; pin the zone to UTC."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def submissions() -> list[Submission]:
    return [
        make_submission(
            1,
            "Contact Form Submission - S. Suresh & Associates",
            SubmissionType.CONTACT,
            name="Sita Sharma",
            email="sita@acme.com.np",
            subject="Audit engagement",
        ),
        make_submission(
            2,
            "Email Subscription List - Professional Edge Global",
            SubmissionType.SUBSCRIPTION,
            email="ravi@globex.com",
        ),
        make_submission(
            3,
            "Consultation Emails - S. Suresh & Associates",
            SubmissionType.SUBSCRIPTION,
            email="hari@initech.org",
        ),
        make_submission(
            4,
            "Claim Form Submission - Everest Claims and Advisory",
            SubmissionType.CONTACT,
            name="Maya Gurung",
            email="maya@everest.com.np",
            subject="Insurance claim",
        ),
    ]
