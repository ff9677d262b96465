"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Protocol

from app.domain import CurrentConditions, ForecastPoint, LocationQuery, UnitSystem


class WeatherDataSource(Protocol):
    """Interface for anything that can answer the two dashboard legs."""

    def fetch_current_conditions(
        self,
        query: LocationQuery,
        *,
        units: UnitSystem = UnitSystem.METRIC,
    ) -> CurrentConditions:
        """Return current conditions at the queried location."""
        ...

    def fetch_forecast(
        self,
        query: LocationQuery,
        *,
        units: UnitSystem = UnitSystem.METRIC,
    ) -> List[ForecastPoint]:
        """Return the forecast series at the queried location."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap two callables so backends (or test fakes) can be swapped in."""

    current: Callable[..., CurrentConditions]
    forecast: Callable[..., List[ForecastPoint]]

    def fetch_current_conditions(self, *args, **kwargs) -> CurrentConditions:
        """Delegate to the configured current-conditions callable."""
        return self.current(*args, **kwargs)

    def fetch_forecast(self, *args, **kwargs) -> List[ForecastPoint]:
        """Delegate to the configured forecast callable."""
        return self.forecast(*args, **kwargs)
