"""Key/value repositories for per-user Budgetify data.

Aggregations never touch storage; services receive a repository and
read/write whole lists under namespaced keys such as
``budgetify-transactions-<user_id>``.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .errors import StorageError


def user_key(kind: str, user_id: Optional[str]) -> str:
    """Namespaced key, e.g. ``budgetify-transactions-42`` (``demo`` without a user)."""
    return f"budgetify-{kind}-{user_id or 'demo'}"


class Repository(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryRepository:
    """Dictionary-backed repository; values are deep-copied on the way in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileRepository:
    """All keys stored in a single JSON document.

    A missing or unreadable file behaves like an empty store; write
    failures raise :class:`StorageError`.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError):
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(data, indent=2, sort_keys=True)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('w', encoding='utf-8') as handle:
                handle.write(payload)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
