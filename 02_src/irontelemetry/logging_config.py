"""Structured logging for IronTelemetry.

The library only creates loggers under the ``irontelemetry`` namespace;
handlers are installed by the host process (main.py, the SIM) through
setup_logging().
"""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path

LOGGER_NAME = "irontelemetry"

# Reserved keys of the JSON line; context entries never overwrite them
_RESERVED = ("ts", "level", "logger", "msg", "where", "exc")


class JSONFormatter(logging.Formatter):
    """One JSON object per record; extra={"context": {...}} is merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            for key, value in context.items():
                if key not in _RESERVED:
                    entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        # Extras may hold arbitrary objects (exceptions, paths)
        return json.dumps(entry, default=str)


def build_logging_config(level: str, log_file: str | None = None) -> dict:
    """dictConfig payload: JSON to stdout, plus a rotating file when requested."""
    handlers: dict[str, dict] = {
        "stdout": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "formatter": "json",
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"json": {"()": JSONFormatter}},
        "handlers": handlers,
        "root": {"level": level.upper(), "handlers": sorted(handlers)},
    }


def setup_logging(log_level: str | None = None, log_file: str | None = None) -> None:
    """
    Install JSON logging for the host process.

    Args:
        log_level: Root level; falls back to the LOG_LEVEL env var, then INFO.
        log_file: Optional rotating log file; falls back to LOG_FILE.
    """
    level = log_level or os.getenv("LOG_LEVEL", "INFO")
    log_file = log_file or os.getenv("LOG_FILE")

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(level, log_file))


def enable_debug() -> None:
    """Lower the package logger to DEBUG."""
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
