"""IronTelemetry client."""

__version__ = "0.1.0"

from .breadcrumbs import BreadcrumbBuffer
from .client import TelemetryClient
from .config import (
    ParsedDsn,
    ResolvedOptions,
    TelemetryOptions,
    parse_dsn,
    resolve_options,
)
from .errors import ConfigurationError, NoActiveJourneyError, TelemetryError
from .helpers import (
    ExceptionHooks,
    capture_and_rethrow,
    install_exception_hooks,
    track_step,
    track_step_async,
)
from .journey import Journey, JourneyScope, Step, StepScope
from .models import (
    Breadcrumb,
    BreadcrumbCategory,
    ExceptionInfo,
    JourneyContext,
    JourneyStatus,
    JourneyStep,
    PlatformInfo,
    SendResult,
    SeverityLevel,
    StackFrame,
    StepStatus,
    TelemetryEvent,
    User,
)
from .queue import OfflineQueue
from .storage import IStorage, MemoryStorage, SQLiteStorage
from .transport import HttpTransport, ITransport

__all__ = [
    "__version__",
    # Client
    "TelemetryClient",
    "TelemetryOptions",
    "ResolvedOptions",
    "ParsedDsn",
    "parse_dsn",
    "resolve_options",
    # Helpers
    "capture_and_rethrow",
    "track_step",
    "track_step_async",
    "install_exception_hooks",
    "ExceptionHooks",
    # Errors
    "TelemetryError",
    "ConfigurationError",
    "NoActiveJourneyError",
    # Models
    "SeverityLevel",
    "User",
    "StackFrame",
    "ExceptionInfo",
    "PlatformInfo",
    "TelemetryEvent",
    "SendResult",
    "Breadcrumb",
    "BreadcrumbCategory",
    "JourneyContext",
    "JourneyStep",
    "JourneyStatus",
    "StepStatus",
    # Components
    "BreadcrumbBuffer",
    "Journey",
    "Step",
    "JourneyScope",
    "StepScope",
    "OfflineQueue",
    "IStorage",
    "SQLiteStorage",
    "MemoryStorage",
    "ITransport",
    "HttpTransport",
]
