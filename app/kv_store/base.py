"""Protocol shared by the key-value persistence backends."""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """String keys to string values; callers own the serialization."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove ``key`` without raising if it is absent."""
