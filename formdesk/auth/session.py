"""Admin session kept in the key-value store under one key."""

import json
import secrets
import string
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from formdesk.errors import StoreError
from formdesk.storage.kv import KeyValueStore

logger = structlog.get_logger(__name__)

SESSION_KEY = "adminSession"
SESSION_TTL_MINUTES = 30

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_session_id() -> str:
    """``session_`` followed by 9 random base-36 characters."""
    return "session_" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


@dataclass
class Session:
    """An established admin session; ``timestamp`` is last activity in epoch ms."""

    id: str
    user: dict[str, Any] = field(default_factory=dict)
    timestamp: int = 0


class SessionManager:
    """
    Create, read, validate and expire the admin session.

    A session is valid while less than ``ttl_minutes`` have passed since
    its last ``touch()`` (or creation).
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_minutes: int = SESSION_TTL_MINUTES,
        clock: Callable[[], datetime] = _utc_now,
        key: str = SESSION_KEY,
    ) -> None:
        self._store = store
        self._ttl_ms = ttl_minutes * 60_000
        self._clock = clock
        self._key = key

    def _now_ms(self) -> int:
        return int(self._clock().timestamp() * 1000)

    async def _save(self, session: Session) -> None:
        await self._store.set(self._key, json.dumps(asdict(session)))

    async def create(self, user: dict[str, Any]) -> str:
        """Start a session for ``user`` and return its id."""
        session = Session(id=new_session_id(), user=dict(user), timestamp=self._now_ms())
        await self._save(session)
        logger.info("Session created", session_id=session.id, user=user.get("username"))
        return session.id

    async def get(self) -> Session | None:
        try:
            payload = await self._store.get(self._key)
        except StoreError as e:
            logger.warning("Session read failed", error=str(e))
            return None
        if not payload:
            return None

        try:
            data = json.loads(payload)
            return Session(
                id=str(data["id"]),
                user=dict(data.get("user") or {}),
                timestamp=int(data["timestamp"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable session", error=str(e))
            return None

    async def clear(self) -> None:
        await self._store.delete(self._key)

    async def is_valid(self) -> bool:
        session = await self.get()
        if session is None:
            return False
        return self._now_ms() - session.timestamp < self._ttl_ms

    async def touch(self) -> None:
        """Refresh the activity timestamp of an existing session."""
        session = await self.get()
        if session is not None:
            session.timestamp = self._now_ms()
            await self._save(session)
