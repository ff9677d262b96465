"""Pick the key-value backend for favorites from configuration."""

from __future__ import annotations

from app import config
from app.kv_store.base import KeyValueStore
from app.kv_store.file import JsonFileKeyValueStore
from app.kv_store.memory import InMemoryKeyValueStore
from app.kv_store.redis import RedisKeyValueStore
from utils.logging_utils import get_tagged_logger, mask_url_secrets

try:
    import redis  # type: ignore
except ImportError:  # pragma: no cover - optional dependency
    redis = None

logger = get_tagged_logger(__name__, tag="kv_store/factory")


def build_kv_store(settings: config.Settings | None = None) -> KeyValueStore:
    """Redis when configured and reachable, else a JSON file, else memory."""
    settings = settings or config.settings
    if settings.favorites_redis_url and redis:
        try:
            client = redis.Redis.from_url(settings.favorites_redis_url)
            client.ping()
            logger.info("Using RedisKeyValueStore", extra={"redis_url": mask_url_secrets(settings.favorites_redis_url)})
            return RedisKeyValueStore(client)
        except redis.exceptions.RedisError as exc:
            logger.warning("Redis unavailable for favorites; falling back", extra={"error": str(exc)})
    if settings.favorites_path:
        logger.info("Using JsonFileKeyValueStore", extra={"path": settings.favorites_path})
        return JsonFileKeyValueStore(settings.favorites_path)
    logger.info("Using InMemoryKeyValueStore; favorites will not survive a restart")
    return InMemoryKeyValueStore()
