"""HTTP API for the weather dashboard."""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel

from .config import settings
from .data_sources import build_data_source
from .domain import BackgroundKey, CurrentConditions, DashboardSession, LocationQuery, RecentSearch, UnitSystem
from .errors import FetchError, GeolocationError
from .favorites import FavoritesRepository
from .geolocation import GeolocationReport, resolve_geolocation
from .kv_store import build_kv_store
from .presentation import (
    background_image_url,
    condition_animation,
    current_display,
    daily_outlook,
    forecast_display,
    select_background_key,
)
from .session_manager import (
    apply_snapshot,
    begin_fetch,
    create_session,
    get_session,
    record_error,
    refetch_query,
    set_units,
    toggle_theme,
)
from .weather_client import LocationWeatherClient
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")


def require_api_key(x_api_key: str | None = Header(default=None)):
    """Validate the X-API-Key header against the configured static key."""
    # No key configured: dev/default mode, allow everything.
    if not settings.api_key:
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
WEATHER_CLIENT = LocationWeatherClient(build_data_source(settings))
FAVORITES = FavoritesRepository(build_kv_store(settings), key=settings.favorites_key)


class CityRequest(BaseModel):
    """Typed place name to search for."""
    city: str


class UnitsRequest(BaseModel):
    """Unit system to switch to."""
    units: UnitSystem


class FavoriteRequest(BaseModel):
    """Place name to add to or remove from favorites."""
    name: str


class FavoritesResponse(BaseModel):
    """Current favorites list."""
    favorites: list[str]


class DashboardResponse(BaseModel):
    """Everything the page needs to render one dashboard frame."""
    session_id: str
    units: UnitSystem
    dark_mode: bool
    error: Optional[str] = None
    current: Optional[dict[str, str]] = None
    current_raw: Optional[CurrentConditions] = None
    forecast: list[dict[str, str]] = []
    background_key: BackgroundKey
    background_url: str
    animation: Optional[str] = None
    recent_searches: list[RecentSearch] = []
    favorites: list[str] = []
    is_favorite: bool = False


def _require_session(session_id: str) -> DashboardSession:
    """Load a session or raise 404."""
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown session ID")
    return session


def _run_fetch(session_id: str, query: LocationQuery, units: UnitSystem, search_name: str = "") -> None:
    """Fetch weather for a session, applying the result only if it is still the newest request."""
    request_id = WEATHER_CLIENT.next_request_id()
    begin_fetch(session_id, request_id)
    try:
        snapshot = WEATHER_CLIENT.fetch_weather(query, units, request_id=request_id)
    except FetchError as exc:
        logger.warning(
            "Fetch failed for session %s: %s",
            session_id,
            exc,
            extra={"kind": exc.kind.value, "leg": exc.leg, "status_code": exc.status_code},
        )
        record_error(session_id, exc.user_message, request_id=request_id)
        return
    apply_snapshot(session_id, snapshot, search_name=search_name)


def _build_response(session_id: str, session: DashboardSession) -> DashboardResponse:
    """Render a session into the API shape."""
    view = session.view
    current = view.current if view else None
    key = select_background_key(
        current.condition if current else None,
        current.temperature if current else None,
        session.dark_mode,
    )
    favorites = FAVORITES.names()
    units = view.snapshot.units if view else session.units
    return DashboardResponse(
        session_id=session_id,
        units=session.units,
        dark_mode=session.dark_mode,
        error=session.error,
        current=current_display(current, units) if current else None,
        current_raw=current,
        forecast=[forecast_display(p, units, current.utc_offset) for p in daily_outlook(view.forecast)] if view else [],
        background_key=key,
        background_url=background_image_url(key),
        animation=condition_animation(current.condition) if current else None,
        recent_searches=session.recent_searches,
        favorites=favorites,
        is_favorite=bool(current and current.name in favorites),
    )


def _respond(session_id: str) -> DashboardResponse:
    return _build_response(session_id, _require_session(session_id))


@router.post("/session/start", response_model=DashboardResponse)
def start_session():
    """Create a session and load the default city."""
    session_id = create_session(settings.default_units)
    logger.info(f"Starting session {session_id} with {settings.default_city} ({settings.default_units.value})")
    _run_fetch(
        session_id,
        LocationQuery.for_name(settings.default_city),
        settings.default_units,
        search_name=settings.default_city,
    )
    return _respond(session_id)


@router.get("/session/{session_id}", response_model=DashboardResponse)
def get_dashboard(session_id: str):
    """Return the current dashboard for a session."""
    return _respond(session_id)


@router.post("/session/{session_id}/search", response_model=DashboardResponse)
def search_city(session_id: str, req: CityRequest):
    """Fetch weather for a typed place name."""
    session = _require_session(session_id)
    city = req.city.strip()
    if not city:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="City must not be empty.")
    _run_fetch(session_id, LocationQuery.for_name(city), session.units, search_name=city)
    return _respond(session_id)


@router.post("/session/{session_id}/geolocate", response_model=DashboardResponse)
def geolocate(session_id: str, report: GeolocationReport):
    """Fetch weather for the device position the page reported."""
    session = _require_session(session_id)
    try:
        query = resolve_geolocation(report)
    except GeolocationError as exc:
        logger.info("Geolocation unavailable for session %s: %s", session_id, exc)
        record_error(session_id, exc.user_message)
        return _respond(session_id)
    _run_fetch(session_id, query, session.units)
    return _respond(session_id)


@router.post("/session/{session_id}/units", response_model=DashboardResponse)
def change_units(session_id: str, req: UnitsRequest):
    """Switch units and reload the last location in the new system."""
    session = set_units(session_id, req.units)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown session ID")
    query = refetch_query(session)
    _run_fetch(session_id, query, req.units, search_name=query.name or "")
    return _respond(session_id)


@router.post("/session/{session_id}/theme", response_model=DashboardResponse)
def flip_theme(session_id: str):
    """Toggle dark mode for a session."""
    if toggle_theme(session_id) is None:
        raise HTTPException(status_code=404, detail="Unknown session ID")
    return _respond(session_id)


@router.get("/favorites", response_model=FavoritesResponse)
def list_favorites():
    """Return the favorites list."""
    return FavoritesResponse(favorites=FAVORITES.names())


@router.post("/favorites/toggle", response_model=FavoritesResponse)
def toggle_favorite_place(req: FavoriteRequest):
    """Add a place to favorites, or remove it if already there."""
    if not req.name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name must not be empty.")
    return FavoritesResponse(favorites=FAVORITES.toggle(req.name))
