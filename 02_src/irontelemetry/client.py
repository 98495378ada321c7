"""TelemetryClient: capture, sampling, filtering, delivery and offline fallback."""

import asyncio
import random
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from .breadcrumbs import BreadcrumbBuffer
from .config import (
    ResolvedOptions,
    TelemetryOptions,
    generate_event_id,
    resolve_options,
)
from .errors import NoActiveJourneyError
from .journey import Journey, JourneyScope, StepScope
from .logging_config import enable_debug, get_logger
from .models import (
    Breadcrumb,
    BreadcrumbCategory,
    ExceptionInfo,
    SendResult,
    SeverityLevel,
    TelemetryEvent,
    User,
)
from .queue import OfflineQueue
from .runtime import get_platform_info, parse_exception
from .storage import IStorage, SQLiteStorage
from .transport import HttpTransport, ITransport

logger = get_logger(__name__)


class TelemetryClient:
    """
    Builds events from ambient state and delivers them.

    Send path: snapshot -> sample -> before_send -> transport, with the
    offline queue as fallback when delivery fails. A background task drains
    the queue every ``flush_interval`` seconds once the client is started.

    Injected transports and storages are owned by the caller: the client
    neither initializes nor closes them.
    """

    def __init__(
        self,
        options: TelemetryOptions | str,
        transport: ITransport | None = None,
        storage: IStorage | None = None,
    ):
        if isinstance(options, str):
            options = TelemetryOptions(dsn=options)

        # Raises ConfigurationError on an invalid DSN
        self._options: ResolvedOptions = resolve_options(options)
        if self._options.debug:
            enable_debug()

        self._owned_transport: HttpTransport | None = None
        if transport is None:
            self._owned_transport = HttpTransport(
                api_base_url=self._options.api_base_url,
                public_key=self._options.parsed_dsn.public_key,
                timeout=self._options.timeout,
            )
            transport = self._owned_transport
        self._transport: ITransport = transport

        self._owned_storage: IStorage | None = None
        self._queue: OfflineQueue | None = None
        if self._options.enable_offline_queue:
            if storage is None:
                self._owned_storage = SQLiteStorage(self._options.queue_path)
                storage = self._owned_storage
            self._queue = OfflineQueue(
                storage,
                max_size=self._options.max_offline_queue_size,
                storage_key=self._options.queue_storage_key,
            )

        self._breadcrumbs = BreadcrumbBuffer(self._options.max_breadcrumbs)
        self._tags: dict[str, str] = {}
        self._extra: dict[str, Any] = {}
        self._user: User | None = None
        self._current_journey: Journey | None = None

        self._started = False
        self._start_lock = asyncio.Lock()
        self._flush_task: asyncio.Task | None = None
        self._pending_drains: set[asyncio.Task] = set()

        logger.debug("Initialized with DSN: %s", self._options.dsn)

    # Lifecycle

    async def start(self) -> None:
        """
        Open storage, restore the offline queue and start the periodic drain.

        Concurrent callers wait for the same initialization; the client counts
        as started only once the persisted queue is loaded.
        """
        if self._started:
            return

        async with self._start_lock:
            if self._started:
                return

            if self._owned_storage is not None:
                try:
                    await self._owned_storage.init()
                except Exception as e:
                    logger.error("Failed to open queue storage: %s", e, exc_info=True)

            if self._queue is not None:
                await self._queue.load()
                if self._options.flush_interval > 0:
                    self._flush_task = asyncio.create_task(self._flush_loop())

            self._started = True

        logger.info("Telemetry client started")

    def close(self) -> None:
        """Stop the periodic drain. Pending queue contents are not flushed."""
        if self._flush_task:
            self._flush_task.cancel()
            self._flush_task = None

    async def aclose(self) -> None:
        """close(), then wait for running drains and release owned resources."""
        self.close()

        if self._pending_drains:
            await asyncio.gather(*self._pending_drains, return_exceptions=True)

        if self._owned_transport is not None:
            await self._owned_transport.close()
        if self._owned_storage is not None:
            await self._owned_storage.close()
        logger.info("Telemetry client closed")

    async def __aenter__(self) -> "TelemetryClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # Capture

    async def capture(
        self,
        exception_or_message: BaseException | str,
        level: SeverityLevel | str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> SendResult:
        """Capture an exception (default level error) or a message (default level info)."""
        if isinstance(exception_or_message, BaseException):
            exception = parse_exception(exception_or_message)
            event = self._build_event(
                SeverityLevel(level or SeverityLevel.ERROR),
                exception.message,
                exception,
                extra,
            )
        else:
            event = self._build_event(
                SeverityLevel(level or SeverityLevel.INFO),
                str(exception_or_message),
                None,
                extra,
            )
        return await self._send_event(event)

    async def capture_exception(
        self, error: BaseException | object, extra: dict[str, Any] | None = None
    ) -> SendResult:
        """Capture an exception."""
        exception = parse_exception(error)
        event = self._build_event(SeverityLevel.ERROR, exception.message, exception, extra)
        return await self._send_event(event)

    async def capture_message(
        self,
        message: str,
        level: SeverityLevel | str = SeverityLevel.INFO,
        extra: dict[str, Any] | None = None,
    ) -> SendResult:
        """Capture a message."""
        event = self._build_event(SeverityLevel(level), message, None, extra)
        return await self._send_event(event)

    # Ambient state

    def add_breadcrumb(
        self,
        message: str,
        category: BreadcrumbCategory | str = BreadcrumbCategory.CUSTOM,
        level: SeverityLevel | str | None = SeverityLevel.INFO,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Add a breadcrumb from its parts."""
        self._breadcrumbs.add(
            Breadcrumb(
                message=message,
                category=BreadcrumbCategory(category),
                level=SeverityLevel(level) if level else None,
                data=data,
            )
        )

    def record_breadcrumb(self, breadcrumb: Breadcrumb) -> None:
        """Add a prepared breadcrumb."""
        self._breadcrumbs.add(breadcrumb)

    def set_user(
        self, id: str, email: str | None = None, data: dict[str, Any] | None = None
    ) -> None:
        """Set user context."""
        self._user = User(id=id, email=email, data=dict(data) if data else data)

    def clear_user(self) -> None:
        """Clear user context."""
        self._user = None

    def set_tag(self, key: str, value: str) -> None:
        self._tags[key] = value

    def set_extra(self, key: str, value: Any) -> None:
        self._extra[key] = value

    # Journeys

    def start_journey(self, name: str) -> JourneyScope:
        """Start a journey; it becomes current until its scope exits."""
        journey = Journey(name)

        if self._user:
            journey.set_user(self._user.id, self._user.email, self._user.data)

        self._current_journey = journey

        def detach() -> None:
            # A newer journey may have replaced this one already
            if self._current_journey is journey:
                self._current_journey = None

        return JourneyScope(journey, detach)

    def start_step(self, name: str, category: str | None = None) -> StepScope:
        """Start a step in the current journey."""
        if not self._current_journey:
            raise NoActiveJourneyError("No active journey. Call start_journey() first.")

        step = self._current_journey.start_step(name, category)
        return StepScope(step)

    @property
    def current_journey(self) -> Journey | None:
        return self._current_journey

    # Delivery

    async def flush(self) -> int:
        """Drain the offline queue now. Returns the number of delivered events."""
        await self.start()
        if self._queue is None:
            return 0
        return await self._queue.drain(self._transport)

    @property
    def options(self) -> ResolvedOptions:
        return self._options

    @property
    def breadcrumbs(self) -> BreadcrumbBuffer:
        return self._breadcrumbs

    @property
    def queue(self) -> OfflineQueue | None:
        return self._queue

    @property
    def transport(self) -> ITransport:
        return self._transport

    def _build_event(
        self,
        level: SeverityLevel,
        message: str | None = None,
        exception: ExceptionInfo | None = None,
        extra: dict[str, Any] | None = None,
    ) -> TelemetryEvent:
        journey = self._current_journey
        user = (journey.get_user() if journey else None) or self._user
        if user is not None:
            user = replace(user, data=dict(user.data) if user.data else user.data)

        return TelemetryEvent(
            event_id=generate_event_id(),
            timestamp=datetime.now(timezone.utc),
            level=level,
            message=message,
            exception=exception,
            user=user,
            tags=dict(self._tags),
            extra={**self._extra, **(extra or {})},
            breadcrumbs=self._breadcrumbs.snapshot(),
            journey=journey.snapshot() if journey else None,
            environment=self._options.environment,
            app_version=self._options.app_version,
            platform=get_platform_info(),
        )

    async def _send_event(self, event: TelemetryEvent) -> SendResult:
        await self.start()

        if random.random() >= self._options.sample_rate:
            logger.debug("Event %s dropped due to sample rate", event.event_id)
            return SendResult(success=True, event_id=event.event_id, dropped=True)

        # Hook errors propagate to the caller
        decision = self._options.before_send(event)
        if decision is False:
            logger.debug("Event %s dropped by before_send hook", event.event_id)
            return SendResult(success=True, event_id=event.event_id, dropped=True)

        if decision is True:
            event_to_send = event
        elif isinstance(decision, TelemetryEvent):
            event_to_send = decision
        else:
            raise TypeError(
                f"before_send must return a bool or a TelemetryEvent, got {type(decision).__name__}"
            )

        result = await self._transport.send(event_to_send)

        if not result.success and self._queue is not None:
            await self._queue.enqueue(event_to_send)
            logger.info(
                "Event delivery failed, queued for retry",
                extra={"context": {"event_id": event_to_send.event_id, "error": result.error}},
            )
            return replace(result, event_id=event_to_send.event_id, queued=True)

        if not result.success:
            logger.warning("Event %s delivery failed: %s", event_to_send.event_id, result.error)

        return result

    async def _flush_loop(self) -> None:
        """Background timer that drains the offline queue."""
        while True:
            try:
                await asyncio.sleep(self._options.flush_interval)

                # Drains run as their own tasks so close() never cancels an in-flight send
                task = asyncio.create_task(self._drain_queue())
                self._pending_drains.add(task)
                task.add_done_callback(self._pending_drains.discard)
                await asyncio.shield(task)

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Periodic queue drain failed: %s", e, exc_info=True)

    async def _drain_queue(self) -> None:
        if self._queue is not None:
            await self._queue.drain(self._transport)
