"""Tests for raw record normalization."""

import pytest

from formdesk.ingestion.normalizer import (
    FALLBACK_EMAIL,
    FALLBACK_MESSAGE,
    FALLBACK_NAME,
    FALLBACK_SUBJECT,
    classify_source,
    normalize_records,
)
from formdesk.ingestion.schemas import CacheEntry, Submission, SubmissionType


def _tagged(source: str, **fields) -> dict:
    return {**fields, "_source": source, "_fields": list(fields)}


class TestClassifySource:
    @pytest.mark.parametrize(
        "name",
        [
            "Career Subscription - Professional Edge Global",
            "Email Subscription List - Professional Edge Global",
            "Consultation Emails - S. Suresh & Associates",
        ],
    )
    def test_subscription_markers(self, name):
        assert classify_source(name) == SubmissionType.SUBSCRIPTION

    @pytest.mark.parametrize(
        "name",
        [
            "Contact Form Submission - S. Suresh & Associates",
            "Claim Form Submission - Everest Claims and Advisory",
            "",
        ],
    )
    def test_everything_else_is_contact(self, name):
        assert classify_source(name) == SubmissionType.CONTACT

    def test_markers_are_case_sensitive(self):
        assert classify_source("newsletter subscription") == SubmissionType.CONTACT


class TestNormalizeRecords:
    def test_ids_are_positional(self, registry, clock):
        records = [_tagged(registry.names[0], email=f"user{i}@example.com") for i in range(4)]

        result = normalize_records(records, registry, clock=clock)

        assert [s.id for s in result] == ["1", "2", "3", "4"]

    def test_contact_record(self, registry, clock, contact_rows):
        source = registry.names[1]
        [submission] = normalize_records([_tagged(source, **contact_rows[0])], registry, clock=clock)

        assert submission.type == "contact"
        assert submission.source_site == source
        assert submission.source_url == "https://sheets.example.com/contact"
        assert submission.name == "Sita Sharma"
        assert submission.subject == "Audit engagement"
        assert submission.submitted_at == "2025-03-05T14:45:00.000Z"
        assert submission.subscribed is True

    def test_subscription_record_gets_fallbacks(self, registry, clock):
        record = _tagged(registry.names[0], email="anita@example.com")

        [submission] = normalize_records([record], registry, clock=clock)

        assert submission.type == "subscription"
        assert submission.name == FALLBACK_NAME
        assert submission.subject == FALLBACK_SUBJECT
        assert submission.message == FALLBACK_MESSAGE
        assert submission.submitted_at == clock().isoformat()

    def test_company_used_when_subject_missing(self, registry, clock):
        record = _tagged(registry.names[1], name="Hari", company="Globex Pvt Ltd")

        [submission] = normalize_records([record], registry, clock=clock)

        assert submission.subject == "Globex Pvt Ltd"
        assert submission.email == FALLBACK_EMAIL

    def test_subject_preferred_over_company(self, registry, clock):
        record = _tagged(registry.names[1], subject="Tax filing", company="Globex Pvt Ltd")

        [submission] = normalize_records([record], registry, clock=clock)

        assert submission.subject == "Tax filing"

    def test_empty_values_fall_back(self, registry, clock):
        record = _tagged(registry.names[1], name="", email=0, subject=False, message=None)

        [submission] = normalize_records([record], registry, clock=clock)

        assert submission.name == FALLBACK_NAME
        assert submission.subject == FALLBACK_SUBJECT
        assert submission.email == FALLBACK_EMAIL
        assert submission.message == FALLBACK_MESSAGE

    def test_whitespace_cells_are_kept(self, registry, clock):
        record = _tagged(registry.names[1], name="  ", email="a@b.com")

        [submission] = normalize_records([record], registry, clock=clock)

        assert submission.name == "  "

    def test_zero_and_nan_fall_back(self, registry, clock):
        record = _tagged(registry.names[1], name=0.0, email=float("nan"), timestamp=0)

        [submission] = normalize_records([record], registry, clock=clock)

        assert submission.name == FALLBACK_NAME
        assert submission.email == FALLBACK_EMAIL
        assert submission.submitted_at == clock().isoformat()

    def test_non_string_cells_are_stringified(self, registry, clock):
        record = _tagged(registry.names[1], name=12345, message=True)

        [submission] = normalize_records([record], registry, clock=clock)

        assert submission.name == "12345"
        assert submission.message == "true"

    def test_unregistered_source_has_empty_url(self, registry, clock):
        [submission] = normalize_records([_tagged("Retired Form", email="x@y.com")], registry, clock=clock)

        assert submission.source_url == ""
        assert submission.type == "contact"

    def test_missing_timestamps_share_one_fetch_time(self, registry, clock):
        records = [_tagged(registry.names[0], email="a@x.com"), _tagged(registry.names[0], email="b@x.com")]

        result = normalize_records(records, registry, clock=clock)

        assert result[0].submitted_at == result[1].submitted_at

    def test_deterministic_for_fixed_clock(self, registry, clock, contact_rows):
        records = [_tagged(registry.names[1], **contact_rows[0]), _tagged(registry.names[0], email="a@x.com")]

        assert normalize_records(records, registry, clock=clock) == normalize_records(
            records, registry, clock=clock
        )

    def test_empty_input(self, registry, clock):
        assert normalize_records([], registry, clock=clock) == []


class TestSubmissionWireFormat:
    def test_camel_case_keys(self):
        submission = Submission(
            id="1",
            source_site="Contact Form Submission - S. Suresh & Associates",
            type=SubmissionType.CONTACT,
            submitted_at="2025-03-05T14:45:00.000Z",
        )

        wire = submission.to_wire()

        assert wire["sourceSite"] == "Contact Form Submission - S. Suresh & Associates"
        assert wire["submittedAt"] == "2025-03-05T14:45:00.000Z"
        assert wire["type"] == "contact"
        assert "source_site" not in wire

    def test_cache_entry_parses_wire_json(self):
        payload = (
            '{"data": [{"id": "1", "sourceSite": "Form", "sourceUrl": "", "type": "subscription",'
            ' "submittedAt": "2025-01-01T00:00:00Z", "name": "Not provided", "email": "a@b.com",'
            ' "subject": "No subject", "message": "No message provided", "subscribed": true}],'
            ' "timestamp": 1735689600000}'
        )

        entry = CacheEntry.model_validate_json(payload)

        assert entry.timestamp == 1735689600000
        assert entry.data[0].email == "a@b.com"
        assert entry.data[0].type == "subscription"
