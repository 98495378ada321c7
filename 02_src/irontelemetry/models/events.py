"""Event-related data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .breadcrumbs import Breadcrumb
    from .journey import JourneyContext


class SeverityLevel(str, Enum):
    """Severity levels for events."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


@dataclass
class User:
    """User information attached to events."""

    id: str
    email: str | None = None
    data: dict[str, Any] | None = None


@dataclass
class StackFrame:
    """A single frame of a captured stack trace."""

    function: str | None = None
    filename: str | None = None
    lineno: int | None = None
    colno: int | None = None


@dataclass
class ExceptionInfo:
    """Exception type, message and ordered stack frames."""

    type: str
    message: str
    stacktrace: list[StackFrame] | None = None


@dataclass
class PlatformInfo:
    """Runtime the event was captured on."""

    name: str
    version: str | None = None
    os: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class TelemetryEvent:
    """Event payload delivered to the collector."""

    event_id: str
    timestamp: datetime
    level: SeverityLevel
    platform: PlatformInfo
    message: str | None = None
    exception: ExceptionInfo | None = None
    user: User | None = None
    tags: dict[str, str] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    breadcrumbs: list[Breadcrumb] = field(default_factory=list)
    journey: JourneyContext | None = None
    environment: str | None = None
    app_version: str | None = None


@dataclass
class SendResult:
    """Outcome of a capture or a single delivery attempt."""

    success: bool
    event_id: str | None = None
    error: str | None = None
    queued: bool = False  # failed delivery, kept in the offline queue
    dropped: bool = False  # sampled out or rejected by before_send
