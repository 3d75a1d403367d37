"""Key-value store backing the folder forest and its side tables.

The core only needs ``get`` and ``update``.  ``JsonStore`` keeps everything in
a single JSON document on disk and rewrites it on every update; it assumes a
single writer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .config import NAMESPACE

FOLDERS_KEY = f"{NAMESPACE}.folders"


def folder_key(folder_id: str) -> str:
    return f"{NAMESPACE}.folder.{folder_id}"


def request_key(request_id: str) -> str:
    return f"{NAMESPACE}.request.{request_id}"


class MemoryStore:
    """In-memory store with the same contract as :class:`JsonStore`."""

    def __init__(self, data: Dict[str, Any] | None = None):
        self._data: Dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def update(self, key: str, value: Any) -> None:
        """Set ``key`` to ``value``; ``None`` removes the key."""
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        self.update(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        return [k for k in self._data if k.startswith(prefix)]

    def _flush(self) -> None:
        pass


class JsonStore(MemoryStore):
    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> dict:
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except ValueError:
                return {}
            return data if isinstance(data, dict) else {}
        return {}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")
