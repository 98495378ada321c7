"""Journey and step data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class StepStatus(str, Enum):
    """Lifecycle of a journey step."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class JourneyStatus(str, Enum):
    """Lifecycle of a journey."""

    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class JourneyStep:
    """A named sub-phase of a journey."""

    name: str
    started_at: datetime
    category: str | None = None
    ended_at: datetime | None = None
    status: StepStatus = StepStatus.IN_PROGRESS
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class JourneyContext:
    """Read-only projection of a journey attached to events."""

    journey_id: str
    name: str
    started_at: datetime
    current_step: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
