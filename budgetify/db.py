from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, List, Optional

from .config import DB_PATH, ensure_data_directories
from .errors import StorageError

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);
"""


class SqliteRepository:
    """Repository backed by a single ``kv`` table; values are stored as JSON text."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DB_PATH
        self._initialized = False

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        if self.path == DB_PATH:
            ensure_data_directories()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(str(self.path))
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database {self.path}: {exc}") from exc
        try:
            if not self._initialized:
                conn.executescript(SCHEMA_SQL)
                conn.commit()
                self._initialized = True
                logger.debug("Initialized key/value schema in %s", self.path)
            yield conn
        except sqlite3.Error as exc:
            raise StorageError(f"Database error in {self.path}: {exc}") from exc
        finally:
            conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        with self.connect() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return default
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, sort_keys=True)
        with self.connect() as conn:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, payload, datetime.now().isoformat(timespec='seconds')),
            )
            conn.commit()

    def delete(self, key: str) -> None:
        with self.connect() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()

    def keys(self, prefix: str = '') -> List[str]:
        with self.connect() as conn:
            rows = conn.execute(
                "SELECT key FROM kv WHERE key LIKE ? ORDER BY key", (f"{prefix}%",)
            ).fetchall()
        return [row[0] for row in rows]
