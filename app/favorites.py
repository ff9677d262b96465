"""Favorite places, persisted through a key-value store."""

from __future__ import annotations

import json
import threading
from typing import List

from app.history import toggle_favorite
from app.kv_store import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/favorites")


class FavoritesRepository:
    """Owns the FavoriteSet: loaded once, written back on every change.

    Stored as a JSON array of place names. Membership is exact string match.
    """

    def __init__(self, store: KeyValueStore, key: str = "favorites") -> None:
        self.store = store
        self.key = key
        self._lock = threading.Lock()
        self._favorites: List[str] = self._load()

    def _load(self) -> List[str]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Stored favorites are not valid JSON; starting empty", extra={"error": str(exc)})
            return []
        if not isinstance(data, list):
            logger.warning("Stored favorites are not a list; starting empty")
            return []
        return [str(name) for name in data]

    def _save(self, names: List[str]) -> None:
        self.store.set(self.key, json.dumps(names, ensure_ascii=False))

    def names(self) -> List[str]:
        with self._lock:
            return list(self._favorites)

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._favorites

    def toggle(self, name: str) -> List[str]:
        """Add or remove ``name`` and persist; returns the updated list."""
        with self._lock:
            updated = toggle_favorite(self._favorites, name)
            self._save(updated)
            self._favorites = updated
            logger.debug("Favorites now %s", self._favorites)
            return list(self._favorites)
