import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from chiso_bookings.core.logger import logger


class MemoryKeyValueStore:
    """
    Process-local key-value namespace with prefix listing.
    Values are JSON-compatible objects.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            self._refresh()
            return self._data.get(key)

    def exists(self, key: str) -> bool:
        with self._lock:
            self._refresh()
            return key in self._data

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._refresh()
            self._data[key] = value
            self._flush()

    def list(self, prefix: str = "") -> List[Tuple[str, Any]]:
        """Returns (key, value) pairs whose key starts with prefix, sorted by key."""
        with self._lock:
            self._refresh()
            return sorted(
                (key, value) for key, value in self._data.items() if key.startswith(prefix)
            )

    def _refresh(self) -> None:
        pass

    def _flush(self) -> None:
        pass


class JsonFileKeyValueStore(MemoryKeyValueStore):
    """
    Same namespace, persisted to a single JSON file after every write.

    Every operation re-reads the file first, so several workers sharing one
    file see each other's keys and a put only replaces its own key. There is
    no cross-process lock: two workers writing in the same instant can still
    lose one write, and the capacity check stays best-effort.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        super().__init__(self._load())

    def _read(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.info(f"🆕 No store file at {self.path}, starting empty.")
            return {}

        data = self._read()
        logger.info(f"📂 Loaded {len(data)} keys from {self.path}")
        return data

    def _refresh(self) -> None:
        if self.path.exists():
            self._data = self._read()

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)


def create_store(path: str = ""):
    if path:
        return JsonFileKeyValueStore(path)
    return MemoryKeyValueStore()
