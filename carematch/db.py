"""SQLite-backed key/value helpers."""
from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class KeyValueStore:
    """JSON values keyed by string, one row per key.

    Mirrors the on-device defaults store the app was built around: every value
    is a JSON document, reads never raise on malformed data.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def initialize(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS profile_index (
                    user_type TEXT NOT NULL,
                    email TEXT NOT NULL,
                    key TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_type, email)
                );
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS profile_index_email ON profile_index (email)")
            conn.commit()

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.path)
        try:
            yield conn
        finally:
            conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        with self.get_connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        if not row:
            return default
        try:
            return json.loads(row[0])
        except ValueError:
            logger.warning("Ignoring undecodable value for key %s", key)
            return default

    def contains(self, key: str) -> bool:
        with self.get_connection() as conn:
            row = conn.execute("SELECT 1 FROM kv_store WHERE key = ?", (key,)).fetchone()
        return row is not None

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        with self.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, payload, _now_iso()),
            )
            conn.commit()

    def delete(self, *keys: str) -> None:
        if not keys:
            return
        with self.get_connection() as conn:
            conn.executemany("DELETE FROM kv_store WHERE key = ?", [(key,) for key in keys])
            conn.commit()

    def keys(self, prefix: Optional[str] = None) -> List[str]:
        """Return stored keys in sorted order, optionally limited to a prefix."""
        with self.get_connection() as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key ASC").fetchall()
        keys = [row[0] for row in rows]
        if prefix is None:
            return keys
        return [key for key in keys if key.startswith(prefix)]

    def index_profile(self, user_type: str, email: str, key: str) -> None:
        with self.get_connection() as conn:
            conn.execute(
                """
                INSERT INTO profile_index (user_type, email, key, updated_at) VALUES (?, ?, ?, ?)
                ON CONFLICT(user_type, email) DO UPDATE SET key = excluded.key, updated_at = excluded.updated_at
                """,
                (user_type, email, key, _now_iso()),
            )
            conn.commit()

    def lookup_profile_key(self, email: str, user_type: Optional[str] = None) -> Optional[str]:
        query = "SELECT key FROM profile_index WHERE email = ?"
        params: List[Any] = [email]
        if user_type is not None:
            query += " AND user_type = ?"
            params.append(user_type)
        query += " ORDER BY user_type ASC LIMIT 1"
        with self.get_connection() as conn:
            row = conn.execute(query, params).fetchone()
        return row[0] if row else None

