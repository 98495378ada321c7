"""Call-site helpers that take an explicit client handle."""

import asyncio
import sys
from typing import Any, Awaitable, Callable, NoReturn, TypeVar

from .client import TelemetryClient
from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def capture_and_rethrow(
    client: TelemetryClient, error: BaseException, extra: dict[str, Any] | None = None
) -> NoReturn:
    """
    Capture an exception, then re-raise it.

    Intended for except blocks::

        except PaymentError as e:
            await capture_and_rethrow(client, e)
    """
    await client.capture_exception(error, extra)
    raise error


def track_step(
    client: TelemetryClient,
    name: str,
    fn: Callable[[], T],
    category: str | None = None,
) -> T:
    """Run fn as a step of the current journey; the step fails if fn raises."""
    if client.current_journey is None:
        return fn()

    scope = client.start_step(name, category)
    try:
        result = fn()
    except BaseException:
        scope.get_step().fail()
        raise
    scope.close()
    return result


async def track_step_async(
    client: TelemetryClient,
    name: str,
    fn: Callable[[], Awaitable[T]],
    category: str | None = None,
) -> T:
    """Async variant of track_step."""
    if client.current_journey is None:
        return await fn()

    scope = client.start_step(name, category)
    try:
        result = await fn()
    except BaseException:
        scope.get_step().fail()
        raise
    scope.close()
    return result


class ExceptionHooks:
    """
    Reports uncaught exceptions through a client.

    Chains ``sys.excepthook`` and, when an event loop is given or running,
    that loop's exception handler. Previous hooks still run after capture.
    Call uninstall() to restore them.
    """

    def __init__(self, client: TelemetryClient, loop: asyncio.AbstractEventLoop | None = None):
        self._client = client
        self._loop = loop
        self._pending: set[asyncio.Task] = set()
        self._previous_excepthook = None
        self._previous_loop_handler = None
        self._installed = False

    def install(self) -> "ExceptionHooks":
        if self._installed:
            return self

        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._excepthook

        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError:
                pass
        if self._loop is not None:
            self._previous_loop_handler = self._loop.get_exception_handler()
            self._loop.set_exception_handler(self._loop_exception_handler)

        self._installed = True
        return self

    def uninstall(self) -> None:
        if not self._installed:
            return

        sys.excepthook = self._previous_excepthook
        if self._loop is not None:
            self._loop.set_exception_handler(self._previous_loop_handler)
        self._installed = False

    async def wait_pending(self) -> None:
        """Wait for captures scheduled on the event loop."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _excepthook(self, exc_type, exc, tb) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None

            if loop is not None:
                self._schedule(loop, exc)
            else:
                asyncio.run(self._capture(exc))

        self._previous_excepthook(exc_type, exc, tb)

    def _loop_exception_handler(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        error = context.get("exception") or context.get(
            "message", "Unhandled exception in event loop"
        )
        self._schedule(loop, error)

        if self._previous_loop_handler is not None:
            self._previous_loop_handler(loop, context)
        else:
            loop.default_exception_handler(context)

    def _schedule(self, loop: asyncio.AbstractEventLoop, error: BaseException | object) -> None:
        task = loop.create_task(self._capture(error))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _capture(self, error: BaseException | object) -> None:
        # Failures here must not re-enter the loop's exception handler
        try:
            await self._client.capture_exception(error)
        except Exception as e:
            logger.error("Failed to capture uncaught exception: %s", e, exc_info=True)


def install_exception_hooks(
    client: TelemetryClient, loop: asyncio.AbstractEventLoop | None = None
) -> ExceptionHooks:
    """Capture uncaught exceptions and unhandled event loop errors through client."""
    return ExceptionHooks(client, loop).install()
