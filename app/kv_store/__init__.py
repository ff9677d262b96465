"""Key-value persistence backends."""

from .base import KeyValueStore
from .file import JsonFileKeyValueStore
from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore
from .factory import build_kv_store

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "RedisKeyValueStore",
    "build_kv_store",
]
