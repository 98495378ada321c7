"""Exception parsing and platform fingerprinting."""

import platform
import sys
import traceback

from . import __version__
from .models import ExceptionInfo, PlatformInfo, StackFrame


def parse_exception(error: BaseException | object) -> ExceptionInfo:
    """Convert an exception (or any raised value) into ExceptionInfo."""
    if isinstance(error, BaseException):
        return ExceptionInfo(
            type=type(error).__name__,
            message=str(error),
            stacktrace=parse_traceback(error),
        )

    return ExceptionInfo(type="Error", message=str(error))


def parse_traceback(error: BaseException) -> list[StackFrame] | None:
    """Frames of the exception's traceback, outermost first; None if it was never raised."""
    if error.__traceback__ is None:
        return None

    frames = [
        StackFrame(
            function=frame.name,
            filename=frame.filename,
            lineno=frame.lineno,
            colno=getattr(frame, "colno", None),
        )
        for frame in traceback.extract_tb(error.__traceback__)
    ]
    return frames or None


def get_platform_info() -> PlatformInfo:
    """Describe the running interpreter."""
    return PlatformInfo(
        name="python",
        version=platform.python_version(),
        os=sys.platform,
        user_agent=f"irontelemetry-python/{__version__}",
    )
