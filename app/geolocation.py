"""Turn the browser's geolocation outcome into a location query."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.domain import LocationQuery
from app.errors import GeolocationDenied, GeolocationUnsupported


class GeolocationFailure(str, Enum):
    """Failure reasons the page can report."""
    DENIED = "denied"
    UNSUPPORTED = "unsupported"


class GeolocationReport(BaseModel):
    """Either a coordinate pair from the device or the reason there is none."""
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    error: Optional[GeolocationFailure] = None

    @field_validator("latitude", "longitude")
    @classmethod
    def finite(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            raise ValueError("coordinate must be finite")
        return v

    @model_validator(mode="after")
    def _coordinates_or_error(self) -> "GeolocationReport":
        has_coords = self.latitude is not None and self.longitude is not None
        if self.error is None and not has_coords:
            raise ValueError("latitude and longitude are required unless an error is reported")
        return self


def resolve_geolocation(report: GeolocationReport) -> LocationQuery:
    """Return a coordinate query, or raise the matching GeolocationError."""
    if report.error is GeolocationFailure.UNSUPPORTED:
        raise GeolocationUnsupported()
    if report.error is GeolocationFailure.DENIED:
        raise GeolocationDenied()
    return LocationQuery.for_coordinates(report.latitude, report.longitude)
