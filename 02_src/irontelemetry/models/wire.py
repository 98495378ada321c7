"""Wire format for events: the JSON shape sent to the collector and persisted in the offline queue."""

import json
from datetime import datetime, timezone
from typing import Any

from .breadcrumbs import Breadcrumb, BreadcrumbCategory
from .events import (
    ExceptionInfo,
    PlatformInfo,
    SeverityLevel,
    StackFrame,
    TelemetryEvent,
    User,
)
from .journey import JourneyContext


def format_timestamp(value: datetime) -> str:
    """Render a datetime as an ISO-8601 string (UTC assumed for naive values)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string back into an aware datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {key: value for key, value in data.items() if value is not None}


def breadcrumb_to_wire(breadcrumb: Breadcrumb) -> dict[str, Any]:
    timestamp = breadcrumb.timestamp or datetime.now(timezone.utc)
    return _compact(
        {
            "timestamp": format_timestamp(timestamp),
            "category": breadcrumb.category.value,
            "message": breadcrumb.message,
            "level": breadcrumb.level.value if breadcrumb.level else None,
            "data": breadcrumb.data,
        }
    )


def breadcrumb_from_wire(data: dict[str, Any]) -> Breadcrumb:
    return Breadcrumb(
        message=data["message"],
        category=BreadcrumbCategory(data.get("category", "custom")),
        level=SeverityLevel(data["level"]) if data.get("level") else None,
        data=data.get("data"),
        timestamp=parse_timestamp(data["timestamp"]),
    )


def _exception_to_wire(exception: ExceptionInfo) -> dict[str, Any]:
    stacktrace = None
    if exception.stacktrace is not None:
        stacktrace = [
            _compact(
                {
                    "function": frame.function,
                    "filename": frame.filename,
                    "lineno": frame.lineno,
                    "colno": frame.colno,
                }
            )
            for frame in exception.stacktrace
        ]
    return _compact(
        {
            "type": exception.type,
            "message": exception.message,
            "stacktrace": stacktrace,
        }
    )


def _exception_from_wire(data: dict[str, Any]) -> ExceptionInfo:
    frames = data.get("stacktrace")
    return ExceptionInfo(
        type=data["type"],
        message=data.get("message", ""),
        stacktrace=(
            [
                StackFrame(
                    function=frame.get("function"),
                    filename=frame.get("filename"),
                    lineno=frame.get("lineno"),
                    colno=frame.get("colno"),
                )
                for frame in frames
            ]
            if frames is not None
            else None
        ),
    )


def _journey_to_wire(journey: JourneyContext) -> dict[str, Any]:
    return _compact(
        {
            "journeyId": journey.journey_id,
            "name": journey.name,
            "currentStep": journey.current_step,
            "startedAt": format_timestamp(journey.started_at),
            "metadata": journey.metadata,
        }
    )


def _journey_from_wire(data: dict[str, Any]) -> JourneyContext:
    return JourneyContext(
        journey_id=data["journeyId"],
        name=data["name"],
        started_at=parse_timestamp(data["startedAt"]),
        current_step=data.get("currentStep"),
        metadata=data.get("metadata") or {},
    )


def event_to_wire(event: TelemetryEvent) -> dict[str, Any]:
    """Serialize an event into its wire JSON object."""
    return _compact(
        {
            "eventId": event.event_id,
            "timestamp": format_timestamp(event.timestamp),
            "level": event.level.value,
            "message": event.message,
            "exception": (
                _exception_to_wire(event.exception) if event.exception else None
            ),
            "user": (
                _compact(
                    {
                        "id": event.user.id,
                        "email": event.user.email,
                        "data": event.user.data,
                    }
                )
                if event.user
                else None
            ),
            "tags": event.tags,
            "extra": event.extra,
            "breadcrumbs": [breadcrumb_to_wire(b) for b in event.breadcrumbs],
            "journey": _journey_to_wire(event.journey) if event.journey else None,
            "environment": event.environment,
            "appVersion": event.app_version,
            "platform": _compact(
                {
                    "name": event.platform.name,
                    "version": event.platform.version,
                    "os": event.platform.os,
                    "userAgent": event.platform.user_agent,
                }
            ),
        }
    )


def event_from_wire(data: dict[str, Any]) -> TelemetryEvent:
    """Rebuild an event from its wire JSON object.

    Raises KeyError/ValueError/TypeError on malformed input; callers loading
    untrusted data decide how to degrade.
    """
    user = data.get("user")
    platform = data.get("platform") or {"name": "unknown"}

    return TelemetryEvent(
        event_id=data["eventId"],
        timestamp=parse_timestamp(data["timestamp"]),
        level=SeverityLevel(data["level"]),
        message=data.get("message"),
        exception=(
            _exception_from_wire(data["exception"]) if data.get("exception") else None
        ),
        user=(
            User(id=user["id"], email=user.get("email"), data=user.get("data"))
            if user
            else None
        ),
        tags=dict(data.get("tags") or {}),
        extra=dict(data.get("extra") or {}),
        breadcrumbs=[breadcrumb_from_wire(b) for b in data.get("breadcrumbs") or []],
        journey=_journey_from_wire(data["journey"]) if data.get("journey") else None,
        environment=data.get("environment"),
        app_version=data.get("appVersion"),
        platform=PlatformInfo(
            name=platform["name"],
            version=platform.get("version"),
            os=platform.get("os"),
            user_agent=platform.get("userAgent"),
        ),
    )


def dumps_wire(payload: Any) -> str:
    """Encode a wire payload as JSON; values JSON cannot represent are stringified."""
    return json.dumps(payload, default=str)
