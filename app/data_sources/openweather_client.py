"""Helpers for fetching current conditions and forecasts from OpenWeatherMap."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests

from app import config
from app.domain import CurrentConditions, ForecastPoint, LocationQuery, UnitSystem
from app.errors import FetchError, FetchFailure
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag='openweather_client')

# Shared connection pool for both legs; tests swap this for a stub.
session = requests.Session()

CURRENT_PATH = "weather"
FORECAST_PATH = "forecast"

LEG_CURRENT = "current"
LEG_FORECAST = "forecast"

# Decode failures surface as MALFORMED_RESPONSE rather than crashing the request.
_DECODE_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)


def location_params(query: LocationQuery) -> Dict[str, Any]:
    """Return the location part of the query string (q= or lat=/lon=)."""
    if query.is_coordinates:
        return {"lat": query.latitude, "lon": query.longitude}
    return {"q": query.name}


def build_params(query: LocationQuery, units: UnitSystem, api_key: Optional[str]) -> Dict[str, Any]:
    """Location, units and credential parameters shared by both legs."""
    params = location_params(query)
    params["units"] = UnitSystem(units).value
    params["appid"] = api_key or ""
    return params


def _endpoint(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path}"


def _get_json(leg: str, url: str, params: Dict[str, Any], timeout: float) -> Any:
    """GET ``url`` and return the decoded JSON body, mapping every failure to FetchError."""
    logger.debug("OpenWeatherMap GET", extra={"leg": leg, "url": mask_url_secrets(f"{url}?{urlencode(params)}")})
    try:
        resp = session.get(url, params=params, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        raise FetchError(FetchFailure.NETWORK, leg=leg, detail=str(exc)) from exc

    try:
        resp.raise_for_status()
    except requests.exceptions.HTTPError as exc:
        raise FetchError(FetchFailure.UPSTREAM_REJECTED, leg=leg, status_code=resp.status_code) from exc

    try:
        return resp.json()
    except ValueError as exc:
        raise FetchError(FetchFailure.MALFORMED_RESPONSE, leg=leg, status_code=resp.status_code,
                         detail="body is not JSON") from exc


def decode_current(data: Dict[str, Any]) -> CurrentConditions:
    """Turn a /weather payload into CurrentConditions.

    The first element of the ``weather`` array is authoritative for the
    condition label, description and icon.
    """
    main = data["main"]
    weather = data["weather"][0]
    sys_block = data.get("sys") or {}
    return CurrentConditions(
        name=data["name"],
        country=sys_block.get("country"),
        temperature=main["temp"],
        feels_like=main["feels_like"],
        humidity=main["humidity"],
        pressure=main["pressure"],
        wind_speed=(data.get("wind") or {}).get("speed", 0.0),
        cloud_cover=(data.get("clouds") or {}).get("all", 0.0),
        visibility=data.get("visibility"),
        condition=weather["main"],
        description=weather.get("description", ""),
        icon=weather.get("icon"),
        sunrise=sys_block.get("sunrise"),
        sunset=sys_block.get("sunset"),
        observed_at=data["dt"],
        utc_offset=data.get("timezone", 0),
    )


def decode_forecast(data: Dict[str, Any]) -> List[ForecastPoint]:
    """Turn a /forecast payload into ForecastPoints in upstream order."""
    out: List[ForecastPoint] = []
    for item in data["list"]:
        main = item["main"]
        weather = item["weather"][0]
        out.append(
            ForecastPoint(
                observed_at=item["dt"],
                temperature=main["temp"],
                temp_min=main["temp_min"],
                temp_max=main["temp_max"],
                condition=weather["main"],
                description=weather.get("description"),
                icon=weather.get("icon"),
            )
        )
    return out


def _resolve(api_key: Optional[str], base_url: Optional[str], timeout: Optional[float]):
    s = config.settings
    return (
        api_key if api_key is not None else s.weather_api_key,
        base_url or s.weather_base_url,
        timeout if timeout is not None else s.request_timeout_seconds,
    )


def fetch_current_conditions(
    query: LocationQuery,
    *,
    units: UnitSystem = UnitSystem.METRIC,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> CurrentConditions:
    """Fetch current conditions for a place name or coordinate pair."""
    api_key, base_url, timeout = _resolve(api_key, base_url, timeout)
    data = _get_json(LEG_CURRENT, _endpoint(base_url, CURRENT_PATH), build_params(query, units, api_key), timeout)
    try:
        current = decode_current(data)
    except _DECODE_ERRORS as exc:
        raise FetchError(FetchFailure.MALFORMED_RESPONSE, leg=LEG_CURRENT, detail=repr(exc)) from exc
    logger.debug("Decoded current conditions", extra={"place": current.name, "condition": current.condition})
    return current


def fetch_forecast(
    query: LocationQuery,
    *,
    units: UnitSystem = UnitSystem.METRIC,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> List[ForecastPoint]:
    """Fetch the 3-hourly forecast series for a place name or coordinate pair."""
    api_key, base_url, timeout = _resolve(api_key, base_url, timeout)
    data = _get_json(LEG_FORECAST, _endpoint(base_url, FORECAST_PATH), build_params(query, units, api_key), timeout)
    try:
        points = decode_forecast(data)
    except _DECODE_ERRORS as exc:
        raise FetchError(FetchFailure.MALFORMED_RESPONSE, leg=LEG_FORECAST, detail=repr(exc)) from exc
    logger.debug("Decoded forecast", extra={"points": len(points)})
    return points
