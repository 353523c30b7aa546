"""Dashboard summary: headline counts and submissions grouped by organization."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from formdesk.ingestion.schemas import Submission, SubmissionType

SURESH = "S. Suresh & Associates"
PROFESSIONAL_EDGE = "Professional Edge Global"

ORGANIZATION_SITES: dict[str, str] = {
    SURESH: "https://ssureshandassociates.com.np",
    PROFESSIONAL_EDGE: "https://professionaledgeglobal.com.np",
}


def organization_for(source_site: str) -> str:
    """Collapse a source name onto the organization that owns the form."""
    lowered = source_site.lower()
    if "suresh" in lowered or "ssuresh" in lowered:
        return SURESH
    if "professional" in lowered or "edge" in lowered or "global" in lowered:
        return PROFESSIONAL_EDGE
    return source_site


def organization_url(source_site: str) -> str:
    """Website of the owning organization, or the source name when unknown."""
    return ORGANIZATION_SITES.get(organization_for(source_site), source_site)


@dataclass
class OrganizationGroup:
    name: str
    url: str
    submissions: list[Submission] = field(default_factory=list)


@dataclass
class DashboardSummary:
    total_submissions: int
    source_websites: int
    contact_forms: int
    subscriptions: int
    by_organization: list[OrganizationGroup] = field(default_factory=list)

    def stats(self) -> list[tuple[str, int]]:
        """Headline stat cards in display order."""
        return [
            ("Total Submissions", self.total_submissions),
            ("Source Websites", self.source_websites),
            ("Contact Forms", self.contact_forms),
            ("Subscriptions", self.subscriptions),
        ]


def summarize(submissions: Sequence[Submission]) -> DashboardSummary:
    groups: dict[str, OrganizationGroup] = {}
    for submission in submissions:
        org = organization_for(submission.source_site)
        if org not in groups:
            groups[org] = OrganizationGroup(name=org, url=organization_url(submission.source_site))
        groups[org].submissions.append(submission)

    return DashboardSummary(
        total_submissions=len(submissions),
        source_websites=len(groups),
        contact_forms=sum(1 for s in submissions if s.type == SubmissionType.CONTACT),
        subscriptions=sum(1 for s in submissions if s.type == SubmissionType.SUBSCRIPTION),
        by_organization=list(groups.values()),
    )
