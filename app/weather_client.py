"""Fetch current conditions and forecast for one location as a single result."""
from __future__ import annotations

import itertools
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional

import requests

from app.data_sources import WeatherDataSource, build_data_source
from app.domain import LocationQuery, UnitSystem, WeatherSnapshot
from app.errors import FetchError, FetchFailure
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/weather_client")


class LocationWeatherClient:
    """Runs the current-conditions and forecast legs concurrently.

    Both legs use the same location, units and credential. The caller gets
    either both decoded results or a FetchError; never one of them alone.

    Every fetch is stamped with a request id from a monotonically increasing
    counter. Callers that may have several fetches in flight keep the id of
    the last one they issued and drop snapshots carrying an older id.
    """

    def __init__(self, data_source: WeatherDataSource | None = None) -> None:
        self.data_source = data_source or build_data_source()
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()

    def next_request_id(self) -> int:
        """Issue the next request id."""
        with self._id_lock:
            return next(self._ids)

    def fetch_weather(
        self,
        query: LocationQuery,
        units: UnitSystem = UnitSystem.METRIC,
        *,
        request_id: Optional[int] = None,
    ) -> WeatherSnapshot:
        """Fetch both legs and return them as one WeatherSnapshot.

        Raises FetchError when either leg fails; the other leg's result is
        discarded even if it succeeded.
        """
        if request_id is None:
            request_id = self.next_request_id()
        units = UnitSystem(units)

        logger.info(
            "Fetching weather",
            extra={"request_id": request_id, "location": query.label, "units": units.value},
        )
        # One pool per fetch: concurrent fetches from other sessions never queue behind these legs.
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="weather-leg") as pool:
            current_future = pool.submit(self.data_source.fetch_current_conditions, query, units=units)
            forecast_future = pool.submit(self.data_source.fetch_forecast, query, units=units)
            wait([current_future, forecast_future])

        failures = [exc for exc in (current_future.exception(), forecast_future.exception()) if exc is not None]
        if failures:
            first = failures[0]
            logger.warning(
                "Weather fetch failed for %s: %s",
                query.label,
                "; ".join(str(exc) for exc in failures),
            )
            if isinstance(first, FetchError):
                raise first
            if isinstance(first, requests.exceptions.RequestException):
                raise FetchError(FetchFailure.NETWORK, detail=str(first)) from first
            raise FetchError(FetchFailure.MALFORMED_RESPONSE, detail=repr(first)) from first

        snapshot = WeatherSnapshot(
            request_id=request_id,
            query=query,
            units=units,
            current=current_future.result(),
            forecast=forecast_future.result(),
        )
        logger.info(
            "Fetched weather for %s (%d forecast points)",
            snapshot.current.name,
            len(snapshot.forecast),
        )
        return snapshot
