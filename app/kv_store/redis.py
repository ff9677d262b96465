"""Redis-backed key-value store."""

from typing import Optional

from app.kv_store.base import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="kv_store/redis_kv_store")


class RedisKeyValueStore(KeyValueStore):
    """Plain GET/SET/DEL under a key prefix; values have no TTL."""

    def __init__(self, client, prefix: str = "skycast:") -> None:
        logger.debug("Initializing RedisKeyValueStore")
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        raw = self.client.get(self._key(key))
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    def set(self, key: str, value: str) -> None:
        self.client.set(self._key(key), value.encode("utf-8"))

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))
