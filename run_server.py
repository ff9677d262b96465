import os

import uvicorn

from app.config import settings
from utils.logging_utils import get_tagged_logger, mask_url_secrets, setup_logging

logger = get_tagged_logger(__name__, tag="server")


def warn_on_missing_credentials() -> None:
    """
    Without SKYCAST_WEATHER_API_KEY every upstream call is rejected, and the
    page can only ever show "Location not found. Please try again."
    """
    if not settings.weather_api_key:
        logger.warning("SKYCAST_WEATHER_API_KEY is not set; upstream weather requests will fail.")


def main() -> None:
    setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
    warn_on_missing_credentials()
    logger.info(
        "Serving SkyCast",
        extra={
            "upstream": mask_url_secrets(settings.weather_base_url),
            "default_city": settings.default_city,
            "units": settings.default_units.value,
        },
    )
    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )


if __name__ == "__main__":
    main()
