"""Collector routes."""

from .events import create_events_router
from .health import create_health_router

__all__ = ["create_events_router", "create_health_router"]
