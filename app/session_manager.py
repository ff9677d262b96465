"""Session manager facade: dashboard state transitions over pluggable stores.

Each session's DashboardSession is treated as a value. Every transition
reads it, builds a replacement with ``model_copy`` and saves it back under a
process-wide lock, so concurrent requests on one session never interleave a
read-modify-write.
"""
import threading
from typing import Callable, Optional

try:
    import redis  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    redis = None

from app.config import settings
from app.domain import DashboardSession, LocationQuery, UnitSystem, ViewState, WeatherSnapshot
from app.history import update_recent_searches
from app.presentation import derive_night_flag
from app.session_store import InMemorySessionStore, RedisSessionStore, SessionStore
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="session_manager")


def _init_store() -> SessionStore:
    """Initialize the backing session store based on configuration."""
    logger.debug(f"Initializing session store: redis configured: {'yes' if settings.session_redis_url else 'no'}, redis package present: {'yes' if redis else 'no'}")
    if settings.session_redis_url and redis:
        try:
            client = redis.Redis.from_url(settings.session_redis_url)
            client.ping()
            logger.info("Using RedisSessionStore", extra={"redis_url": mask_url_secrets(settings.session_redis_url)})
            return RedisSessionStore(client, ttl_seconds=settings.session_ttl_seconds)
        except redis.exceptions.RedisError as exc:
            logger.warning("Falling back to InMemorySessionStore (Redis unavailable)", extra={"error": str(exc)})
    return InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)


_store: SessionStore = _init_store()
_lock = threading.RLock()


def use_in_memory_store_for_tests(ttl_seconds: int = 3600) -> None:
    """Override store for tests to ensure isolation and determinism."""
    global _store
    _store = InMemorySessionStore(ttl_seconds=ttl_seconds)


def create_session(units: Optional[UnitSystem] = None) -> str:
    """Create an empty dashboard session and return its ID."""
    return _store.create_session(DashboardSession(units=units or settings.default_units))


def get_session(session_id: str) -> Optional[DashboardSession]:
    """Fetch a session by ID, refreshing TTL if applicable."""
    return _store.get_session(session_id)


def _transition(session_id: str, change: Callable[[DashboardSession], Optional[DashboardSession]]) -> Optional[DashboardSession]:
    """Apply ``change`` atomically; a None result leaves the session untouched."""
    with _lock:
        current = _store.get_session(session_id)
        if current is None:
            return None
        updated = change(current)
        if updated is None:
            return current
        _store.save_session(session_id, updated)
        return updated


def begin_fetch(session_id: str, request_id: int) -> Optional[DashboardSession]:
    """Record ``request_id`` as the newest fetch issued for this session."""
    return _transition(
        session_id,
        lambda s: s.model_copy(update={"latest_request_id": max(s.latest_request_id, request_id)}),
    )


def apply_snapshot(session_id: str, snapshot: WeatherSnapshot, search_name: str = "") -> bool:
    """Install a completed fetch as the session's view.

    Snapshots from superseded requests are dropped. ``search_name`` is the
    typed place name (empty for geolocation) and feeds the recent-search
    window.
    """
    applied = False

    def change(s: DashboardSession) -> Optional[DashboardSession]:
        nonlocal applied
        if snapshot.request_id != s.latest_request_id:
            logger.info(
                "Discarding stale weather result",
                extra={"request_id": snapshot.request_id, "latest_request_id": s.latest_request_id},
            )
            return None
        is_night = derive_night_flag(snapshot.current.observed_at, snapshot.current.utc_offset)
        applied = True
        return s.model_copy(update={
            "view": ViewState(snapshot=snapshot, is_night=is_night),
            "units": snapshot.units,
            "dark_mode": is_night,
            "error": None,
            "last_query": snapshot.query,
            "recent_searches": update_recent_searches(
                s.recent_searches, search_name, limit=settings.recent_search_limit
            ),
        })

    _transition(session_id, change)
    return applied


def record_error(session_id: str, message: str, request_id: Optional[int] = None) -> bool:
    """Set the user-visible error; the current view stays as it was.

    With a ``request_id``, the error is ignored if a newer fetch was issued.
    """
    recorded = False

    def change(s: DashboardSession) -> Optional[DashboardSession]:
        nonlocal recorded
        if request_id is not None and request_id != s.latest_request_id:
            return None
        recorded = True
        return s.model_copy(update={"error": message})

    _transition(session_id, change)
    return recorded


def set_units(session_id: str, units: UnitSystem) -> Optional[DashboardSession]:
    """Switch the session's unit system."""
    return _transition(session_id, lambda s: s.model_copy(update={"units": UnitSystem(units)}))


def toggle_theme(session_id: str) -> Optional[DashboardSession]:
    """Flip dark mode; the next applied fetch resets it from the night flag."""
    return _transition(session_id, lambda s: s.model_copy(update={"dark_mode": not s.dark_mode}))


def refetch_query(session: DashboardSession) -> LocationQuery:
    """The query a unit switch should repeat: the last one, else the default city."""
    return session.last_query or LocationQuery.for_name(settings.default_city)


def delete_session(session_id: str):
    """Delete a session by ID."""
    return _store.delete_session(session_id)


def clear_sessions():
    """Clear all sessions from the backing store (dev/testing)."""
    return _store.clear()
