"""Weather data sources for the dashboard's two upstream legs."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .openweather_client import (
    decode_current,
    decode_forecast,
    fetch_current_conditions,
    fetch_forecast,
)

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "decode_current",
    "decode_forecast",
    "fetch_current_conditions",
    "fetch_forecast",
]
