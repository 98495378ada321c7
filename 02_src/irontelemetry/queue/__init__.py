"""Offline queue module."""

from .offline_queue import OfflineQueue

__all__ = ["OfflineQueue"]
