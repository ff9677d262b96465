"""Process-local session store with sliding expiry, for development and tests."""

import threading
import time
import uuid
from dataclasses import dataclass
from typing import Optional

from app.domain import DashboardSession
from app.session_store.base import SessionStore

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="session_store/memory")


@dataclass
class _Entry:
    state: DashboardSession
    created_at: float
    expires_at: float


class InMemorySessionStore(SessionStore):
    """Dict-backed store; every read or write pushes the expiry out by ``ttl_seconds``.

    ``max_age_seconds`` caps a session's total lifetime regardless of activity.
    Times come from ``time.monotonic`` so wall-clock jumps cannot revive or kill
    sessions.
    """

    def __init__(self, ttl_seconds: int = 3600, max_age_seconds: int | None = None) -> None:
        logger.debug("Initializing InMemorySessionStore", extra={"ttl_seconds": ttl_seconds})
        self.ttl = ttl_seconds
        self.max_age = max_age_seconds
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def _deadline(self, created_at: float, now: float) -> float:
        if self.max_age is None:
            return now + self.ttl
        return min(now + self.ttl, created_at + self.max_age)

    def _touch(self, session_id: str) -> Optional[_Entry]:
        """Return the live entry with its expiry extended; evict it if it has lapsed."""
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        now = time.monotonic()
        if entry.expires_at < now:
            del self._entries[session_id]
            logger.debug("Session %s expired", session_id)
            return None
        entry.expires_at = self._deadline(entry.created_at, now)
        return entry

    def create_session(self, session: Optional[DashboardSession] = None) -> str:
        now = time.monotonic()
        sid = str(uuid.uuid4())
        with self._lock:
            self._entries[sid] = _Entry(
                state=session or DashboardSession(),
                created_at=now,
                expires_at=self._deadline(now, now),
            )
        return sid

    def get_session(self, session_id: str) -> Optional[DashboardSession]:
        with self._lock:
            entry = self._touch(session_id)
            return entry.state if entry else None

    def save_session(self, session_id: str, session: DashboardSession) -> None:
        """Replace a live session's state; unknown or expired ids are ignored."""
        with self._lock:
            entry = self._touch(session_id)
            if entry is not None:
                entry.state = session

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
