"""Request/response models for the development collector."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model: camelCase on the wire, unknown fields kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class WireStackFrame(WireModel):
    function: str | None = None
    filename: str | None = None
    lineno: int | None = None
    colno: int | None = None


class WireException(WireModel):
    type: str
    message: str = ""
    stacktrace: list[WireStackFrame] | None = None


class WireUser(WireModel):
    id: str
    email: str | None = None
    data: dict[str, Any] | None = None


class WireBreadcrumb(WireModel):
    timestamp: datetime
    category: str
    message: str
    level: str | None = None
    data: dict[str, Any] | None = None


class WireJourney(WireModel):
    journey_id: str
    name: str
    current_step: str | None = None
    started_at: datetime
    metadata: dict[str, Any] = {}


class WirePlatform(WireModel):
    name: str
    version: str | None = None
    os: str | None = None
    user_agent: str | None = None


class WireEvent(WireModel):
    """Event body accepted by POST /api/v1/events."""

    event_id: str
    timestamp: datetime
    level: str
    message: str | None = None
    exception: WireException | None = None
    user: WireUser | None = None
    tags: dict[str, str] = {}
    extra: dict[str, Any] = {}
    breadcrumbs: list[WireBreadcrumb] = []
    journey: WireJourney | None = None
    environment: str | None = None
    app_version: str | None = None
    platform: WirePlatform


class EventAccepted(BaseModel):
    """Response for an accepted event."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event_id: str


class HealthResponse(BaseModel):
    status: str
