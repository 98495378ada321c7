"""Tests for Storage."""

import pytest

from irontelemetry.storage import MemoryStorage, SQLiteStorage


class TestSQLiteStorageInit:
    """Tests for SQLiteStorage initialization."""

    async def test_init_creates_tables(self, storage):
        """Test that init creates the key/value table."""
        async with storage._conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ) as cursor:
            tables = [row[0] for row in await cursor.fetchall()]
            assert "kv_store" in tables

    async def test_init_creates_parent_directory(self, tmp_path):
        """Test that a file database gets its directory created."""
        db_path = tmp_path / "nested" / "dir" / "queue.db"
        st = SQLiteStorage(db_path)

        await st.init()
        await st.close()

        assert db_path.exists()

    async def test_uninitialized_storage_raises(self):
        """Test that using storage before init() raises."""
        st = SQLiteStorage(":memory:")

        with pytest.raises(RuntimeError, match="not initialized"):
            await st.get("key")

        with pytest.raises(RuntimeError, match="not initialized"):
            await st.set("key", "value")

    async def test_close_is_idempotent(self):
        st = SQLiteStorage(":memory:")
        await st.init()

        await st.close()
        await st.close()


class TestSQLiteStorageKeyValue:
    """Tests for get/set/delete."""

    async def test_get_missing_key(self, storage):
        """Test retrieving a missing key returns None."""
        assert await storage.get("missing") is None

    async def test_set_and_get(self, storage):
        await storage.set("queue", "[]")

        assert await storage.get("queue") == "[]"

    async def test_set_replaces_value(self, storage):
        """Test that saving the same key replaces its value."""
        await storage.set("queue", "[1]")
        await storage.set("queue", "[1, 2]")

        assert await storage.get("queue") == "[1, 2]"

    async def test_keys_are_independent(self, storage):
        await storage.set("a", "1")
        await storage.set("b", "2")

        assert await storage.get("a") == "1"
        assert await storage.get("b") == "2"

    async def test_delete(self, storage):
        await storage.set("queue", "[]")

        await storage.delete("queue")

        assert await storage.get("queue") is None

    async def test_values_survive_reopen(self, tmp_path):
        """Test that a file database keeps values across connections."""
        db_path = tmp_path / "queue.db"

        first = SQLiteStorage(db_path)
        await first.init()
        await first.set("queue", '["e1"]')
        await first.close()

        second = SQLiteStorage(str(db_path))
        await second.init()
        value = await second.get("queue")
        await second.close()

        assert value == '["e1"]'


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    async def test_set_get_delete(self):
        st = MemoryStorage()
        await st.init()

        await st.set("queue", "[]")
        assert await st.get("queue") == "[]"

        await st.delete("queue")
        assert await st.get("queue") is None

        await st.delete("queue")
        await st.close()
