"""Durable key/value storage for persisted client state."""

from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_queue_path


class IStorage(Protocol):
    """Durable string storage addressed by key."""

    async def init(self) -> None:
        """Open the store."""
        ...

    async def close(self) -> None:
        """Close the store."""
        ...

    async def get(self, key: str) -> str | None:
        """Read the value stored under key, None if absent."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Replace the value stored under key."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


class SQLiteStorage:
    """SQLite key/value storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_queue_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create the key/value table."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def get(self, key: str) -> str | None:
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        cursor = await self._conn.execute(
            """
            SELECT value
            FROM kv_store
            WHERE key = ?
            """,
            (key,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return row[0]

    async def set(self, key: str, value: str) -> None:
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute(
            """
            INSERT OR REPLACE INTO kv_store (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            """,
            (key, value),
        )
        await self._conn.commit()

    async def delete(self, key: str) -> None:
        if not self._conn:
            raise RuntimeError("Storage not initialized")

        await self._conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        await self._conn.commit()


class MemoryStorage:
    """In-process storage; contents are lost when the process exits."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def init(self) -> None:
        return

    async def close(self) -> None:
        return

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)
