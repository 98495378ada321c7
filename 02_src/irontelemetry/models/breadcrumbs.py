"""Breadcrumb data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .events import SeverityLevel


class BreadcrumbCategory(str, Enum):
    """Breadcrumb categories."""

    UI = "ui"
    HTTP = "http"
    NAVIGATION = "navigation"
    CONSOLE = "console"
    AUTH = "auth"
    BUSINESS = "business"
    NOTIFICATION = "notification"
    CUSTOM = "custom"


@dataclass
class Breadcrumb:
    """A contextual note describing something that happened before an event."""

    message: str
    category: BreadcrumbCategory = BreadcrumbCategory.CUSTOM
    level: SeverityLevel | None = None
    data: dict[str, Any] | None = None
    timestamp: datetime | None = None  # assigned by the buffer when missing
