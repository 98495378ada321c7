"""Storage module."""

from .storage import IStorage, MemoryStorage, SQLiteStorage

__all__ = ["IStorage", "MemoryStorage", "SQLiteStorage"]
