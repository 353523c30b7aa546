"""
Submission filtering and CSV export.

The export mirrors what an operator sees in the submissions table: one
row per submission, every field quoted, blanks shown as "N/A".
"""

import csv
import io
from collections.abc import Sequence
from datetime import date, datetime, tzinfo
from typing import Literal

from formdesk.ingestion.schemas import Submission, SubmissionType
from formdesk.reports.dashboard import ORGANIZATION_SITES, organization_for

TypeFilter = Literal["all", "contact", "subscription"]

CSV_HEADER = ["ID", "Type", "Name", "Email", "Company", "Subject", "Source", "Submitted At"]


def company_from_email(email: str | None) -> str:
    """First label of the email domain: ``jane@acme.co.uk`` → ``acme``."""
    if not email or "@" not in email:
        return ""
    domain = email.split("@", 1)[1]
    return domain.split(".")[0]


def source_website(source_site: str | None) -> str:
    """Bare domain of the owning organization, else the source name."""
    if not source_site:
        return "Unknown source"
    site = ORGANIZATION_SITES.get(organization_for(source_site))
    if site is None:
        return source_site
    return site.removeprefix("https://")


def parse_timestamp(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_submitted_at(value: str, tz: tzinfo | None = None) -> str:
    """
    ``Jan 5, 2025, 03:04 PM`` in ``tz`` (the machine's local zone by
    default), or "Invalid date".
    """
    try:
        moment = parse_timestamp(value).astimezone(tz)
    except (ValueError, AttributeError):
        return "Invalid date"
    return f"{moment:%b} {moment.day}, {moment.year}, {moment:%I:%M %p}"


def _matches_type(submission: Submission, type_filter: TypeFilter) -> bool:
    if type_filter == "all":
        return True
    return submission.type == SubmissionType(type_filter)


def filter_submissions(
    submissions: Sequence[Submission],
    search: str = "",
    type_filter: TypeFilter = "all",
) -> list[Submission]:
    """Case-insensitive search over name, email, subject, website and company."""
    needle = search.lower()
    matched = []
    for s in submissions:
        haystacks = (
            s.name,
            s.email,
            s.subject,
            source_website(s.source_site),
            company_from_email(s.email),
        )
        if any(needle in (h or "").lower() for h in haystacks) and _matches_type(s, type_filter):
            matched.append(s)
    return matched


def _row(submission: Submission) -> list[str]:
    fields = [
        submission.id,
        "Contact Form" if submission.type == SubmissionType.CONTACT else "Subscription",
        submission.name,
        submission.email,
        company_from_email(submission.email),
        submission.subject,
        source_website(submission.source_site),
        format_submitted_at(submission.submitted_at),
    ]
    return [str(f) if f else "N/A" for f in fields]


def export_csv(submissions: Sequence[Submission]) -> str:
    """Render submissions as CSV text with every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(",".join(CSV_HEADER) + "\n")
    for submission in submissions:
        writer.writerow(_row(submission))
    return buffer.getvalue().rstrip("\n")


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"submissions_export_{today.isoformat()}.csv"
