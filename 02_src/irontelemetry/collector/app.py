"""FastAPI application for the development collector."""

from fastapi import FastAPI

from .. import __version__
from .routes import create_events_router, create_health_router
from .store import EventStore


def create_collector_app(
    public_keys: set[str] | None = None,
    store: EventStore | None = None,
) -> FastAPI:
    """Create a collector accepting events for the given public keys (any key if None)."""
    if store is None:
        store = EventStore(public_keys)

    collector = FastAPI(
        title="IronTelemetry Development Collector",
        description="Local stand-in for the event collector",
        version=__version__,
    )
    collector.state.store = store

    collector.include_router(create_events_router(store))
    collector.include_router(create_health_router(store))

    return collector
