"""
Canonical submission schema.

Every source, whatever columns its sheet has, is mapped onto this one
shape. The camelCase aliases are the wire format stored in the cache and
must stay stable: changing them invalidates every cached entry.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SubmissionType(str, Enum):
    """Coarse classification derived from the source name."""

    SUBSCRIPTION = "subscription"
    CONTACT = "contact"


class Submission(BaseModel):
    """
    CANONICAL SUBMISSION SCHEMA

    ``id`` is positional and re-assigned on every normalization pass; it is
    not stable across fetches.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(..., description="1-based position in the normalized result set")
    source_site: str = Field(..., alias="sourceSite", description="Owning source name")
    source_url: str = Field(default="", alias="sourceUrl", description="Registered endpoint URL")
    type: SubmissionType = Field(..., description="subscription or contact")
    submitted_at: str = Field(
        ...,
        alias="submittedAt",
        description="ISO timestamp from the sheet, or fetch time if absent",
    )
    name: str = "Not provided"
    email: str = "No email"
    subject: str = "No subject"
    message: str = "No message provided"
    subscribed: bool = True

    def to_wire(self) -> dict:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class CacheEntry(BaseModel):
    """The single cached result set and its capture time (epoch milliseconds)."""

    data: list[Submission] = Field(default_factory=list)
    timestamp: int

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
