"""Key/value persistence for client-side state, the local-storage of the session client."""

import json
import os
import threading
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class LocalStorage:
    """JSON document on disk holding one entry per store name.

    With no path the data lives only in memory, which is what a
    non-persistent session uses.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._lock = threading.Lock()
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Client storage unreadable, starting empty", path=self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        if not self.path:
            return
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, default=str)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Any:
        with self._lock:
            return self._data.get(key)

    def set_item(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def remove_item(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()
