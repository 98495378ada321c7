"""Exceptions raised by IronTelemetry."""


class TelemetryError(Exception):
    """Base class for IronTelemetry errors."""


class ConfigurationError(TelemetryError, ValueError):
    """Invalid client configuration (for example a malformed DSN)."""


class NoActiveJourneyError(TelemetryError, RuntimeError):
    """A step was started without an active journey."""
