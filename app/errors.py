"""Error types raised while fetching weather or resolving a location."""

from __future__ import annotations

from enum import Enum
from typing import Optional

LOCATION_NOT_FOUND_MESSAGE = "Location not found. Please try again."
GEOLOCATION_DENIED_MESSAGE = "Unable to get your location. Please allow location access."
GEOLOCATION_UNSUPPORTED_MESSAGE = "Geolocation is not supported by your browser"


class FetchFailure(str, Enum):
    """Why an upstream leg failed. Kept for logs; users see one message."""
    NETWORK = "network"
    UPSTREAM_REJECTED = "upstream_rejected"
    MALFORMED_RESPONSE = "malformed_response"


class FetchError(RuntimeError):
    """A weather fetch failed on either leg.

    ``user_message`` is the same for every kind, so an unknown place and a
    network outage look identical to the user. ``kind``, ``leg`` and
    ``status_code`` describe what actually happened.
    """

    user_message = LOCATION_NOT_FOUND_MESSAGE

    def __init__(
        self,
        kind: FetchFailure,
        *,
        leg: Optional[str] = None,
        status_code: Optional[int] = None,
        detail: str = "",
    ) -> None:
        self.kind = kind
        self.leg = leg
        self.status_code = status_code
        self.detail = detail
        super().__init__(self._describe())

    def _describe(self) -> str:
        parts = [f"{self.kind.value}"]
        if self.leg:
            parts.append(f"leg={self.leg}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.detail:
            parts.append(self.detail)
        return " ".join(parts)


class GeolocationError(RuntimeError):
    """The browser could not supply coordinates."""

    user_message = GEOLOCATION_DENIED_MESSAGE

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)


class GeolocationDenied(GeolocationError):
    user_message = GEOLOCATION_DENIED_MESSAGE


class GeolocationUnsupported(GeolocationError):
    user_message = GEOLOCATION_UNSUPPORTED_MESSAGE
