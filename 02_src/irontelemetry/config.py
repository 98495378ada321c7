"""Client configuration, DSN parsing and path helpers."""

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Union
from urllib.parse import urlsplit

from .errors import ConfigurationError
from .models import TelemetryEvent

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
DEFAULT_QUEUE_PATH = DATA_DIR / "irontelemetry_queue.db"

DEFAULT_SAMPLE_RATE = 1.0
DEFAULT_MAX_BREADCRUMBS = 100
DEFAULT_MAX_OFFLINE_QUEUE_SIZE = 500
DEFAULT_FLUSH_INTERVAL = 30.0  # seconds
DEFAULT_TIMEOUT = 10.0  # seconds
DEFAULT_QUEUE_STORAGE_KEY = "irontelemetry_queue"

PathLike = Union[str, Path]

# Returns False to drop, True to send unmodified, or a replacement event.
BeforeSend = Callable[[TelemetryEvent], Union[bool, TelemetryEvent]]


@dataclass(frozen=True)
class ParsedDsn:
    """Parsed DSN components."""

    public_key: str
    host: str
    protocol: str
    api_base_url: str


@dataclass
class TelemetryOptions:
    """Options for constructing a TelemetryClient."""

    dsn: str
    environment: str | None = None
    app_version: str | None = None
    sample_rate: float | None = None
    max_breadcrumbs: int | None = None
    debug: bool = False
    before_send: BeforeSend | None = None
    enable_offline_queue: bool = True
    max_offline_queue_size: int | None = None
    api_base_url: str | None = None
    flush_interval: float = DEFAULT_FLUSH_INTERVAL
    timeout: float = DEFAULT_TIMEOUT
    queue_path: PathLike | None = None
    queue_storage_key: str = DEFAULT_QUEUE_STORAGE_KEY

    @classmethod
    def from_env(cls, **overrides) -> "TelemetryOptions":
        """Build options from IRONTELEMETRY_* environment variables."""
        dsn = os.getenv("IRONTELEMETRY_DSN")
        if not dsn and "dsn" not in overrides:
            raise ConfigurationError("IRONTELEMETRY_DSN environment variable not set")

        sample_rate = os.getenv("IRONTELEMETRY_SAMPLE_RATE")
        values = {
            "dsn": dsn,
            "environment": os.getenv("IRONTELEMETRY_ENVIRONMENT"),
            "app_version": os.getenv("IRONTELEMETRY_APP_VERSION"),
            "sample_rate": float(sample_rate) if sample_rate else None,
            "queue_path": os.getenv("IRONTELEMETRY_QUEUE_PATH"),
            "debug": os.getenv("IRONTELEMETRY_DEBUG", "").lower() in ("1", "true", "yes"),
        }
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class ResolvedOptions:
    """Options with defaults applied and the DSN parsed."""

    dsn: str
    parsed_dsn: ParsedDsn
    environment: str
    app_version: str
    sample_rate: float
    max_breadcrumbs: int
    debug: bool
    before_send: BeforeSend
    enable_offline_queue: bool
    max_offline_queue_size: int
    api_base_url: str
    flush_interval: float
    timeout: float
    queue_path: PathLike
    queue_storage_key: str


def parse_dsn(dsn: str) -> ParsedDsn:
    """
    Parse a DSN string into its components.

    Format: https://pk_live_xxx@irontelemetry.com

    Raises:
        ConfigurationError: if the DSN is malformed or lacks a pk_ public key.
    """
    try:
        parts = urlsplit(dsn)
        port = parts.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid DSN format: {dsn}") from e

    if not parts.scheme or not parts.hostname:
        raise ConfigurationError(f"Invalid DSN format: {dsn}")

    public_key = parts.username
    if not public_key or not public_key.startswith("pk_"):
        raise ConfigurationError("DSN must contain a valid public key starting with pk_")

    host = parts.hostname
    if port:
        host = f"{host}:{port}"

    return ParsedDsn(
        public_key=public_key,
        host=host,
        protocol=parts.scheme,
        api_base_url=f"{parts.scheme}://{host}",
    )


def resolve_queue_path(value: PathLike | None = None) -> PathLike:
    """Resolve the offline queue database location to an absolute path."""
    if not value:
        return DEFAULT_QUEUE_PATH

    if str(value) == ":memory:":
        return ":memory:"

    candidate = Path(value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _send_unmodified(event: TelemetryEvent) -> bool:
    return True


def resolve_options(options: TelemetryOptions) -> ResolvedOptions:
    """Validate options and merge them with defaults."""
    parsed_dsn = parse_dsn(options.dsn)

    sample_rate = (
        options.sample_rate if options.sample_rate is not None else DEFAULT_SAMPLE_RATE
    )

    return ResolvedOptions(
        dsn=options.dsn,
        parsed_dsn=parsed_dsn,
        environment=options.environment or "production",
        app_version=options.app_version or "0.0.0",
        sample_rate=max(0.0, min(1.0, sample_rate)),
        max_breadcrumbs=(
            options.max_breadcrumbs
            if options.max_breadcrumbs is not None
            else DEFAULT_MAX_BREADCRUMBS
        ),
        debug=options.debug,
        before_send=options.before_send or _send_unmodified,
        enable_offline_queue=options.enable_offline_queue,
        max_offline_queue_size=(
            options.max_offline_queue_size
            if options.max_offline_queue_size is not None
            else DEFAULT_MAX_OFFLINE_QUEUE_SIZE
        ),
        api_base_url=(options.api_base_url or parsed_dsn.api_base_url).rstrip("/"),
        flush_interval=options.flush_interval,
        timeout=options.timeout,
        queue_path=resolve_queue_path(options.queue_path),
        queue_storage_key=options.queue_storage_key,
    )


def generate_event_id() -> str:
    """Generate a unique event identifier."""
    return uuid.uuid4().hex
