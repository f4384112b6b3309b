import json
import os
from typing import Any, Optional


class MemoryLocalStore:
    """Small client-side key-value store (theme, language, last surah...)."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value
        self._flush()

    def remove(self, key: str):
        if self._data.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

    def _flush(self):
        pass


class JsonFileLocalStore(MemoryLocalStore):
    """Same as :class:`MemoryLocalStore`, persisted to a JSON file on every write."""

    def __init__(self, path: str):
        self.path = path
        initial = {}
        if os.path.exists(path):
            with open(path, encoding="utf-8") as fh:
                initial = json.load(fh)
        super().__init__(initial)

    def _flush(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(self._data, fh, ensure_ascii=False)
        os.replace(tmp_path, self.path)
