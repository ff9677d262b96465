"""Factory helpers for choosing a weather data source at startup."""

from __future__ import annotations

from functools import partial

from app import config
from app.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from app.data_sources.openweather_client import fetch_current_conditions, fetch_forecast
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "openweather"


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Instantiate the configured weather data source."""
    settings = settings or config.settings
    source = (settings.weather_source or DEFAULT_SOURCE_NAME).lower()

    if source == "openweather":
        if not settings.weather_api_key:
            logger.warning("No weather API key configured; upstream requests will be rejected")
        logger.info("Using OpenWeatherMap data source", extra={"base_url": mask_url_secrets(settings.weather_base_url)})
        bound = dict(
            api_key=settings.weather_api_key,
            base_url=settings.weather_base_url,
            timeout=settings.request_timeout_seconds,
        )
        return CallableWeatherDataSource(
            current=partial(fetch_current_conditions, **bound),
            forecast=partial(fetch_forecast, **bound),
        )

    raise ValueError(f"Unknown weather source '{source}'")
