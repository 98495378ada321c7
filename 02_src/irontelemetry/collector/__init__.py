"""Development collector."""

from .app import create_collector_app
from .store import EventStore

__all__ = ["create_collector_app", "EventStore"]
