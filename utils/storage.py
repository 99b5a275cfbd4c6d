"""Small persistent key-value store (one JSON file) for UI preferences."""
import json
import logging
import os
import threading
from pathlib import Path

logger = logging.getLogger("mtmonitor.storage")


class KeyValueStore:
    """JSON-file backed key-value store, thread-safe.

    Values must be JSON serialisable. Every ``set`` rewrites the file through
    a temp file and ``os.replace``, so a crash never leaves it half-written.
    """

    def __init__(self, path="data/preferences.json"):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self):
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, data):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w") as f:
            json.dump(data, f)
        os.replace(tmp, self.path)

    def _read_for_update(self):
        """Current contents, or {} when the file is unreadable so the next write replaces it."""
        try:
            return self._read()
        except ValueError as e:
            logger.warning(f"Discarding unreadable preferences file {self.path}: {e}")
            return {}

    def get(self, key, default=None):
        with self._lock:
            return self._read().get(key, default)

    def set(self, key, value):
        with self._lock:
            data = self._read_for_update()
            data[key] = value
            self._write(data)

    def remove(self, key):
        with self._lock:
            data = self._read_for_update()
            if data.pop(key, None) is not None:
                self._write(data)
