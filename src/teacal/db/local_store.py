"""Key/value store for JSON blobs, the local fallback for the hosted store."""

import json
from pathlib import Path
from typing import Any

import aiosqlite

from ..errors import CorruptLocalDataError
from .engine import get_db_path, init_db

# Fixed keys. Records of all users live in one list, filtered on read.
TEA_RECORDS_KEY = "tea_records"
USERS_KEY = "users"


def preferences_key(user_id: str) -> str:
    return f"user_preferences:{user_id}"


def budget_key(user_id: str) -> str:
    return f"weekly_budget:{user_id}"


class LocalStore:
    """Synchronous-style load/save of whole blobs.

    Every write replaces the full value; read-modify-write by callers is
    not atomic across processes.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._ready = False

    async def _ensure_schema(self) -> None:
        if not self._ready:
            await init_db(self.db_path)
            self._ready = True

    async def load(self, key: str, default: Any = None) -> Any:
        """Load the value stored under a key, or the default if absent."""
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise CorruptLocalDataError(key, str(e)) from e

    async def save(self, key: str, value: Any) -> None:
        """Store a value under a key, replacing any previous value."""
        await self._ensure_schema()
        blob = json.dumps(value, ensure_ascii=False)
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, blob),
            )
            await db.commit()

    async def delete(self, key: str) -> None:
        """Remove a key if present."""
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await db.commit()

    async def keys(self, prefix: str = "") -> list[str]:
        """List stored keys, optionally filtered by prefix."""
        await self._ensure_schema()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT key FROM kv_store WHERE key LIKE ? ORDER BY key",
                (prefix + "%",),
            )
            rows = await cursor.fetchall()
        return [row[0] for row in rows]
