"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain import UnitSystem
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="app/config")


class Settings(BaseSettings):
    """Environment-driven configuration for the SkyCast dashboard service."""
    model_config = SettingsConfigDict(env_prefix="SKYCAST_", extra="ignore")

    weather_source: str = "openweather"  # options: openweather
    weather_api_key: str | None = None
    weather_base_url: str = "https://api.openweathermap.org/data/2.5"
    request_timeout_seconds: float = 10.0
    default_city: str = "New Delhi"
    default_units: UnitSystem = UnitSystem.METRIC
    recent_search_limit: int = 5
    api_key: str | None = None
    session_redis_url: str | None = None
    session_ttl_seconds: int = 3600
    favorites_redis_url: str | None = None
    favorites_path: str | None = None
    favorites_key: str = "favorites"

    @field_validator("weather_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'weather_api_key', 'api_key'})}")
