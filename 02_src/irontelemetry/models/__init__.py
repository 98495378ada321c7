"""Core data models for IronTelemetry."""

from .events import (
    ExceptionInfo,
    PlatformInfo,
    SendResult,
    SeverityLevel,
    StackFrame,
    TelemetryEvent,
    User,
)
from .breadcrumbs import Breadcrumb, BreadcrumbCategory
from .journey import JourneyContext, JourneyStatus, JourneyStep, StepStatus
from .wire import dumps_wire, event_from_wire, event_to_wire

__all__ = [
    # Events
    "SeverityLevel",
    "User",
    "StackFrame",
    "ExceptionInfo",
    "PlatformInfo",
    "TelemetryEvent",
    "SendResult",
    # Breadcrumbs
    "Breadcrumb",
    "BreadcrumbCategory",
    # Journeys
    "JourneyContext",
    "JourneyStep",
    "JourneyStatus",
    "StepStatus",
    # Wire format
    "event_to_wire",
    "event_from_wire",
    "dumps_wire",
]
