"""
Static admin credential list.

Credentials are matched against a local JSON file. This is a convenience
gate for a single operator, not a security boundary.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


class AdminUser(BaseModel):
    """One entry of the credential list; extra columns are kept."""

    model_config = ConfigDict(extra="allow")

    username: str
    password: str

    def public_profile(self) -> dict[str, Any]:
        """User data safe to store on the session (no password)."""
        return self.model_dump(exclude={"password"})


class CredentialDirectory:
    """Lookup over a fixed list of admin users."""

    def __init__(self, users: list[AdminUser]) -> None:
        self._users = list(users)

    @classmethod
    def from_json(cls, path: Path) -> "CredentialDirectory":
        """
        Load users from a JSON array of ``{username, password, ...}`` objects.

        A missing file yields an empty directory (nobody can log in).
        """
        try:
            with open(path) as f:
                entries = json.load(f)
        except FileNotFoundError:
            logger.warning("Admin users file %s not found; no logins possible", path)
            return cls([])

        try:
            users = [AdminUser.model_validate(e) for e in entries]
        except ValidationError as e:
            raise ValueError(f"Invalid admin users file {path}: {e}") from e
        return cls(users)

    def authenticate(self, username: str, password: str) -> AdminUser | None:
        """Return the user whose username and password both match exactly."""
        for user in self._users:
            if user.username == username and user.password == password:
                return user
        return None

    def __len__(self) -> int:
        return len(self._users)
