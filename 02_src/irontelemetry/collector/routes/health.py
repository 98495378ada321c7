"""Reachability probe route."""

from fastapi import APIRouter, Depends

from ..models import HealthResponse
from ..store import EventStore
from .events import create_public_key_dependency


def create_health_router(store: EventStore) -> APIRouter:
    """Create health router."""
    router = APIRouter(prefix="/api/v1", tags=["health"])
    require_public_key = create_public_key_dependency(store)

    @router.get("/health", response_model=HealthResponse)
    async def health(public_key: str = Depends(require_public_key)) -> HealthResponse:
        return HealthResponse(status="ok")

    return router
