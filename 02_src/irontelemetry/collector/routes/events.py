"""Event ingestion routes."""

from fastapi import APIRouter, Depends, Header, HTTPException

from ...logging_config import get_logger
from ..models import EventAccepted, WireEvent
from ..store import EventStore

logger = get_logger(__name__)


def create_public_key_dependency(store: EventStore):
    """Build a dependency that rejects requests without an accepted X-Public-Key."""

    async def require_public_key(
        x_public_key: str | None = Header(None, alias="X-Public-Key"),
    ) -> str:
        if not store.is_authorized(x_public_key):
            raise HTTPException(status_code=401, detail="Invalid public key")
        return x_public_key

    return require_public_key


def create_events_router(store: EventStore) -> APIRouter:
    """Create event ingestion router."""
    router = APIRouter(prefix="/api/v1", tags=["events"])
    require_public_key = create_public_key_dependency(store)

    @router.post("/events", response_model=EventAccepted, response_model_by_alias=True)
    async def ingest_event(
        event: WireEvent,
        public_key: str = Depends(require_public_key),
    ) -> EventAccepted:
        """Accept one event."""
        store.add(event)
        logger.info(
            "Event received",
            extra={"context": {"event_id": event.event_id, "level": event.level}},
        )
        return EventAccepted(event_id=event.event_id)

    @router.get("/events")
    async def list_events(
        public_key: str = Depends(require_public_key),
    ) -> list[dict]:
        """Events received so far, oldest first."""
        return [e.model_dump(mode="json", by_alias=True) for e in store.all()]

    return router
