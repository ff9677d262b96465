"""Redis-backed session store with TTL."""

import json
import time
import uuid
from typing import Optional

from pydantic import ValidationError

from app.domain import DashboardSession
from app.session_store.base import SessionStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="session_store/redis_session_store")


class RedisSessionStore(SessionStore):
    """Redis-backed sessions with TTL. Stores state as JSON."""

    def __init__(
        self,
        client,
        ttl_seconds: int = 3600,
        max_age_seconds: int | None = None,
        prefix: str = "session:",
    ) -> None:
        """Initialize with a Redis client, TTL, and optional absolute max age."""
        logger.debug("Initializing RedisSessionStore")
        self.client = client
        self.ttl = ttl_seconds
        self.max_age = max_age_seconds
        self.prefix = prefix

    def _key(self, session_id: str) -> str:
        """Return the Redis key for a session id."""
        return f"{self.prefix}{session_id}"

    @staticmethod
    def _dump(session: DashboardSession, *, created_at: float) -> bytes:
        """Serialize session state plus its creation time."""
        data = {"state": session.model_dump(mode="json"), "created_at": created_at}
        return json.dumps(data).encode("utf-8")

    @staticmethod
    def _load(raw: bytes) -> Optional[tuple[DashboardSession, float]]:
        """Deserialize stored bytes into session state and created_at."""
        try:
            data = json.loads(raw.decode("utf-8") if isinstance(raw, bytes) else raw)
            state = DashboardSession.model_validate(data.get("state") or {})
            created_at = float(data.get("created_at") or time.time())
            return state, created_at
        except (ValueError, ValidationError, AttributeError) as exc:
            logger.error("Failed to deserialize session payload: %s", exc)
            return None

    def _is_expired(self, created_at: float) -> bool:
        """Return True if the session exceeds absolute max age."""
        if self.max_age is None:
            return False
        return (time.time() - created_at) > self.max_age

    def _ttl_remaining(self, created_at: float) -> int:
        """Return TTL seconds capped by absolute max age."""
        if self.max_age is None:
            return self.ttl
        remaining = int(max(0.0, (created_at + self.max_age) - time.time()))
        return min(self.ttl, remaining)

    def create_session(self, session: Optional[DashboardSession] = None) -> str:
        """Create and persist a new session, returning its id."""
        sid = str(uuid.uuid4())
        created_at = time.time()
        ttl = self._ttl_remaining(created_at)
        if ttl <= 0:
            raise RuntimeError("Session max age expired before storage")
        self.client.setex(self._key(sid), ttl, self._dump(session or DashboardSession(), created_at=created_at))
        return sid

    def _read(self, session_id: str) -> Optional[tuple[DashboardSession, float]]:
        raw = self.client.get(self._key(session_id))
        if not raw:
            return None
        loaded = self._load(raw)
        if not loaded:
            return None
        if self._is_expired(loaded[1]):
            self.delete_session(session_id)
            return None
        return loaded

    def get_session(self, session_id: str) -> Optional[DashboardSession]:
        """Fetch session state, refreshing TTL, or None if missing/invalid."""
        loaded = self._read(session_id)
        if not loaded:
            return None
        state, created_at = loaded
        ttl = self._ttl_remaining(created_at)
        if ttl > 0:
            self.client.expire(self._key(session_id), ttl)
        return state

    def save_session(self, session_id: str, session: DashboardSession) -> None:
        """Replace an existing session's state; silently no-ops if missing/invalid."""
        loaded = self._read(session_id)
        if not loaded:
            return
        _old, created_at = loaded
        ttl = self._ttl_remaining(created_at)
        if ttl <= 0:
            self.delete_session(session_id)
            return
        self.client.setex(self._key(session_id), ttl, self._dump(session, created_at=created_at))

    def delete_session(self, session_id: str) -> None:
        """Delete a session if present."""
        self.client.delete(self._key(session_id))

    def clear(self) -> None:
        """Clear all sessions under the configured prefix."""
        for key in self.client.scan_iter(f"{self.prefix}*"):
            self.client.delete(key)
