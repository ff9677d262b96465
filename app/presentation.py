"""Presentation helpers: night flag, background selection and display strings.

Everything here is a pure function of decoded weather values. Local times are
computed by shifting the UTC epoch by the location's offset and reading the
result on a UTC calendar, so the server's own time zone never leaks in.
"""

from __future__ import annotations

import datetime as dt
import numbers
from typing import Dict, List, Optional, Sequence

from app.domain import BackgroundKey, CurrentConditions, ForecastPoint, UnitSystem

NIGHT_STARTS_AT_HOUR = 18
NIGHT_ENDS_AT_HOUR = 6

_CONDITION_KEYS: Dict[str, BackgroundKey] = {
    "Thunderstorm": BackgroundKey.THUNDERSTORM,
    "Drizzle": BackgroundKey.DRIZZLE,
    "Rain": BackgroundKey.RAIN,
    "Snow": BackgroundKey.SNOW,
    "Mist": BackgroundKey.MIST,
}

# (inclusive upper bound, key); anything above the last bound is HOT.
_TEMPERATURE_BANDS = (
    (0, BackgroundKey.FREEZING),
    (10, BackgroundKey.COLD),
    (20, BackgroundKey.MILD),
    (30, BackgroundKey.WARM),
)

_UNSPLASH = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&q=80"

BACKGROUND_IMAGES: Dict[BackgroundKey, str] = {
    BackgroundKey.THUNDERSTORM: _UNSPLASH.format("1605727216801-e27ce1d0cc28"),
    BackgroundKey.DRIZZLE: _UNSPLASH.format("1556485689-33e55ab56127"),
    BackgroundKey.RAIN: _UNSPLASH.format("1519692933481-e162a57d6721"),
    BackgroundKey.SNOW: _UNSPLASH.format("1491002052546-bf38f186af56"),
    BackgroundKey.MIST: _UNSPLASH.format("1543968996-ee822b8176ba"),
    BackgroundKey.CLEAR_DAY: _UNSPLASH.format("1601297183305-6df142704ea2"),
    BackgroundKey.CLEAR_NIGHT: _UNSPLASH.format("1507400492013-162706c8c05e"),
    BackgroundKey.CLOUDS_DAY: _UNSPLASH.format("1611928482473-7b27d24eab80"),
    BackgroundKey.CLOUDS_NIGHT: _UNSPLASH.format("1534088568595-a066f410bcda"),
    BackgroundKey.FREEZING: _UNSPLASH.format("1478719059408-592965723cbc"),
    BackgroundKey.COLD: _UNSPLASH.format("1464457312035-3d7d0e0c058e"),
    BackgroundKey.MILD: _UNSPLASH.format("1431440869543-efaf3388c585"),
    BackgroundKey.WARM: _UNSPLASH.format("1507525428034-b723cf961d3e"),
    BackgroundKey.HOT: _UNSPLASH.format("1561553873-e8491a564fd0"),
    BackgroundKey.DEFAULT_DAY: _UNSPLASH.format("1601297183305-6df142704ea2"),
    BackgroundKey.DEFAULT_NIGHT: _UNSPLASH.format("1507400492013-162706c8c05e"),
}

# Conditions that get a particle overlay in the page.
ANIMATED_CONDITIONS = {"Rain": "rain", "Snow": "snow", "Thunderstorm": "lightning"}


def _local_datetime(epoch_seconds: int, utc_offset_seconds: int) -> dt.datetime:
    return dt.datetime.fromtimestamp(epoch_seconds + utc_offset_seconds, tz=dt.timezone.utc)


def derive_night_flag(observation_epoch: int, utc_offset_seconds: int) -> bool:
    """True between 18:00 and 06:00 local time at the observed location.

    A fixed window, not a sunrise/sunset calculation.
    """
    hour = _local_datetime(observation_epoch, utc_offset_seconds).hour
    return hour >= NIGHT_STARTS_AT_HOUR or hour < NIGHT_ENDS_AT_HOUR


def select_background_key(
    condition_label: Optional[str] = None,
    temperature: Optional[float] = None,
    is_night: bool = False,
) -> BackgroundKey:
    """Pick the backdrop: condition first, then temperature band, then day/night default."""
    if condition_label in _CONDITION_KEYS:
        return _CONDITION_KEYS[condition_label]
    if condition_label == "Clear":
        return BackgroundKey.CLEAR_NIGHT if is_night else BackgroundKey.CLEAR_DAY
    if condition_label == "Clouds":
        return BackgroundKey.CLOUDS_NIGHT if is_night else BackgroundKey.CLOUDS_DAY

    if isinstance(temperature, numbers.Real) and not isinstance(temperature, bool):
        for upper, key in _TEMPERATURE_BANDS:
            if temperature <= upper:
                return key
        return BackgroundKey.HOT

    return BackgroundKey.DEFAULT_NIGHT if is_night else BackgroundKey.DEFAULT_DAY


def background_image_url(key: BackgroundKey) -> str:
    return BACKGROUND_IMAGES[key]


def condition_animation(condition_label: Optional[str]) -> Optional[str]:
    """Name of the overlay animation for a condition, if it has one."""
    if not condition_label:
        return None
    return ANIMATED_CONDITIONS.get(condition_label)


def format_local_time(epoch_seconds: int, utc_offset_seconds: int) -> str:
    """12-hour clock at the location, e.g. "07:05 PM"."""
    return _local_datetime(epoch_seconds, utc_offset_seconds).strftime("%I:%M %p")


def format_local_date(epoch_seconds: int, utc_offset_seconds: int) -> str:
    """Long date at the location, e.g. "Monday, January 1, 2024"."""
    local = _local_datetime(epoch_seconds, utc_offset_seconds)
    return f"{local:%A}, {local:%B} {local.day}, {local.year}"


def _degrees(value: float, units: UnitSystem) -> str:
    return f"{round(value)}{units.temperature_unit}"


def daily_outlook(forecast: Sequence[ForecastPoint], *, step: int = 8, days: int = 5) -> List[ForecastPoint]:
    """One sample per day from a 3-hourly series (every ``step``-th point)."""
    return list(forecast[::step][:days])


def current_display(current: CurrentConditions, units: UnitSystem) -> Dict[str, str]:
    """Display strings for the headline card."""
    units = UnitSystem(units)
    return {
        "place": f"{current.name}, {current.country}" if current.country else current.name,
        "local_date": format_local_date(current.observed_at, current.utc_offset),
        "local_time": format_local_time(current.observed_at, current.utc_offset),
        "temperature": _degrees(current.temperature, units),
        "description": current.description,
        "feels_like": _degrees(current.feels_like, units),
        "humidity": f"{current.humidity:.0f}%",
        "wind_speed": f"{current.wind_speed} {units.speed_unit}",
        "cloud_cover": f"{current.cloud_cover:.0f}%",
        "pressure": f"{current.pressure:.0f} hPa",
        "visibility": f"{current.visibility / 1000:.1f} km" if current.visibility is not None else "",
    }


def forecast_display(point: ForecastPoint, units: UnitSystem, utc_offset_seconds: int = 0) -> Dict[str, str]:
    """Display strings for one day in the outlook strip, weekday taken at the location."""
    units = UnitSystem(units)
    day = _local_datetime(point.observed_at, utc_offset_seconds)
    return {
        "weekday": f"{day:%a}",
        "temperature": _degrees(point.temperature, units),
        "range": f"{round(point.temp_min)}° / {round(point.temp_max)}°",
        "condition": point.condition,
    }
