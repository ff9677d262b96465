"""Domain vocabulary for the weather dashboard.

Locations, unit systems, the decoded upstream payloads and the immutable view
state that a completed fetch produces. No fetching or formatting lives here.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _FrozenModel(BaseModel):
    """Base model for values that are replaced, never edited."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class UnitSystem(str, Enum):
    """Measurement convention requested from the upstream API."""
    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def temperature_unit(self) -> str:
        return "°C" if self is UnitSystem.METRIC else "°F"

    @property
    def speed_unit(self) -> str:
        # OpenWeatherMap reports wind in m/s for metric and mph for imperial.
        return "m/s" if self is UnitSystem.METRIC else "mph"


class BackgroundKey(str, Enum):
    """Presentation selector for the dashboard backdrop."""
    THUNDERSTORM = "thunderstorm"
    DRIZZLE = "drizzle"
    RAIN = "rain"
    SNOW = "snow"
    MIST = "mist"
    CLEAR_DAY = "clear_day"
    CLEAR_NIGHT = "clear_night"
    CLOUDS_DAY = "clouds_day"
    CLOUDS_NIGHT = "clouds_night"
    FREEZING = "freezing"
    COLD = "cold"
    MILD = "mild"
    WARM = "warm"
    HOT = "hot"
    DEFAULT_DAY = "default_day"
    DEFAULT_NIGHT = "default_night"


class LocationQuery(_FrozenModel):
    """A place name or a coordinate pair; exactly one form is set."""
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @model_validator(mode="after")
    def _one_form(self) -> "LocationQuery":
        has_name = bool(self.name and self.name.strip())
        has_lat = self.latitude is not None
        has_lon = self.longitude is not None
        if has_lat != has_lon:
            raise ValueError("latitude and longitude must be given together")
        if has_name == has_lat:
            raise ValueError("provide either a place name or coordinates, not both or neither")
        return self

    @classmethod
    def for_name(cls, name: str) -> "LocationQuery":
        return cls(name=name)

    @classmethod
    def for_coordinates(cls, latitude: float, longitude: float) -> "LocationQuery":
        return cls(latitude=latitude, longitude=longitude)

    @property
    def is_coordinates(self) -> bool:
        return self.latitude is not None

    @property
    def label(self) -> str:
        """Human-readable form for logs."""
        if self.is_coordinates:
            return f"{self.latitude:.4f}, {self.longitude:.4f}"
        return self.name or ""


class CurrentConditions(_FrozenModel):
    """Decoded current-conditions response."""
    name: str
    country: Optional[str] = None
    temperature: float
    feels_like: float
    humidity: float
    pressure: float
    wind_speed: float
    cloud_cover: float
    visibility: Optional[float] = None
    condition: str
    description: str = ""
    icon: Optional[str] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None
    observed_at: int  # epoch seconds, UTC
    utc_offset: int = 0  # seconds east of UTC


class ForecastPoint(_FrozenModel):
    """One 3-hourly forecast sample."""
    observed_at: int
    temperature: float
    temp_min: float
    temp_max: float
    condition: str
    description: Optional[str] = None
    icon: Optional[str] = None


ForecastSeries = List[ForecastPoint]


class WeatherSnapshot(_FrozenModel):
    """Current conditions and forecast decoded together by one fetch."""
    request_id: int
    query: LocationQuery
    units: UnitSystem
    current: CurrentConditions
    forecast: List[ForecastPoint]


class RecentSearch(_FrozenModel):
    """Entry in the most-recent-first search window."""
    id: str
    name: str


class ViewState(_FrozenModel):
    """What the dashboard shows after the latest applied fetch."""
    snapshot: WeatherSnapshot
    is_night: bool

    @property
    def current(self) -> CurrentConditions:
        return self.snapshot.current

    @property
    def forecast(self) -> List[ForecastPoint]:
        return self.snapshot.forecast


class DashboardSession(BaseModel):
    """Per-browser dashboard state owned by the session store."""
    model_config = ConfigDict(extra="ignore")

    units: UnitSystem = UnitSystem.METRIC
    view: Optional[ViewState] = None
    recent_searches: List[RecentSearch] = Field(default_factory=list)
    dark_mode: bool = False
    error: Optional[str] = None
    last_query: Optional[LocationQuery] = None
    latest_request_id: int = 0
