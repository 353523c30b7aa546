"""Training-form sheet reader.

Unlike the submission sources, this endpoint returns the raw sheet as a
2-D array whose first row is the header.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from formdesk.errors import FormdeskError
from formdesk.ingestion.http_client import HTTPClient, HTTPClientError

logger = structlog.get_logger(__name__)

EMPTY_CELL = "-"


class TrainingFormError(FormdeskError):
    """Raised when the training sheet cannot be fetched or has the wrong shape."""


@dataclass
class TrainingSheet:
    header: list[str] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def submission_count(self) -> int:
        return len(self.rows)

    def display_rows(self) -> list[list[str]]:
        """Rows with blank cells rendered as ``-``."""
        return [
            [str(cell) if cell not in (None, "") else EMPTY_CELL for cell in row]
            for row in self.rows
        ]


def parse_sheet(payload: Any) -> TrainingSheet:
    if not isinstance(payload, list) or not all(isinstance(row, list) for row in payload):
        raise TrainingFormError("Invalid data format: Expected 2D array")
    if not payload:
        return TrainingSheet()
    return TrainingSheet(
        header=[str(cell) for cell in payload[0]],
        rows=[list(row) for row in payload[1:]],
    )


async def fetch_training_sheet(http: HTTPClient, url: str, sheet: str = "Sheet1") -> TrainingSheet:
    """
    Fetch and validate the training sheet.

    Raises:
        TrainingFormError: On HTTP failure, invalid JSON or a non-2-D payload
    """
    try:
        response = await http.get(url, params={"sheet": sheet})
        payload = response.json()
    except (HTTPClientError, httpx.HTTPError) as e:
        logger.error("Error fetching training submissions", error=str(e))
        raise TrainingFormError(str(e)) from e
    except ValueError as e:
        raise TrainingFormError(f"Invalid JSON from training form: {e}") from e

    return parse_sheet(payload)
