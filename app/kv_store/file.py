"""Key-value store persisted as one JSON object on disk."""

import json
import os
import threading
from pathlib import Path
from typing import Optional

from app.kv_store.base import KeyValueStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="kv_store/json_file_kv_store")


class JsonFileKeyValueStore(KeyValueStore):
    """Stores all keys in a single JSON file, rewritten atomically on each set."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        logger.debug("Initializing JsonFileKeyValueStore at %s", self.path)

    def _read_all(self) -> dict[str, str]:
        """Load the whole file; a missing or unreadable file counts as empty."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Ignoring corrupt key-value file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.error("Ignoring key-value file %s: top level is not an object", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if data.pop(key, None) is not None:
                self._write_all(data)
