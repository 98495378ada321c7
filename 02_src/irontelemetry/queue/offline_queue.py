"""Bounded, persisted FIFO of events that failed delivery."""

import asyncio
import json

from ..config import DEFAULT_QUEUE_STORAGE_KEY
from ..logging_config import get_logger
from ..models import TelemetryEvent, dumps_wire, event_from_wire, event_to_wire
from ..storage import IStorage
from ..transport import ITransport

logger = get_logger(__name__)


class OfflineQueue:
    """
    Offline queue for events the collector did not accept.

    The whole queue is stored as one JSON array under a single storage key
    and rewritten on every change. Storage failures are logged and never
    raised; the in-memory queue stays authoritative for the process.
    """

    def __init__(
        self,
        storage: IStorage,
        max_size: int = 500,
        storage_key: str = DEFAULT_QUEUE_STORAGE_KEY,
    ):
        self._storage = storage
        self._max_size = max_size
        self._storage_key = storage_key
        self._queue: list[TelemetryEvent] = []
        self._drain_lock = asyncio.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def size(self) -> int:
        return len(self._queue)

    @property
    def is_empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)

    async def load(self) -> None:
        """Load the persisted queue. Absent or malformed data yields an empty queue."""
        try:
            raw = await self._storage.get(self._storage_key)
        except Exception as e:
            logger.error("Failed to load queue from storage: %s", e, exc_info=True)
            return

        if not raw:
            return

        try:
            entries = json.loads(raw)
        except ValueError as e:
            logger.warning("Persisted queue is not valid JSON, starting empty: %s", e)
            return

        if not isinstance(entries, list):
            logger.warning("Persisted queue is not a JSON array, starting empty")
            return

        events: list[TelemetryEvent] = []
        for entry in entries:
            try:
                events.append(event_from_wire(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed queue entry: %s", e)

        # Keep the newest entries if the configured size shrank
        if self._max_size >= 0 and len(events) > self._max_size:
            events = events[len(events) - self._max_size :]

        self._queue = events
        logger.debug("Loaded %d queued events", len(self._queue))

    async def enqueue(self, event: TelemetryEvent) -> None:
        """Append an event, dropping the oldest one when the queue is full."""
        if self._max_size <= 0:
            logger.warning("Offline queue has no capacity, dropping event %s", event.event_id)
            return

        while len(self._queue) >= self._max_size:
            dropped = self._queue.pop(0)
            logger.debug("Queue full, dropping oldest event %s", dropped.event_id)

        self._queue.append(event)
        await self._save()

        logger.debug(
            "Event queued, queue size: %d",
            len(self._queue),
            extra={"context": {"event_id": event.event_id}},
        )

    def all(self) -> list[TelemetryEvent]:
        """Copy of all queued events in FIFO order."""
        return list(self._queue)

    async def remove(self, event_id: str) -> None:
        """Remove an event by id."""
        self._queue = [e for e in self._queue if e.event_id != event_id]
        await self._save()

    async def clear(self) -> None:
        """Remove all queued events."""
        self._queue = []
        await self._save()

    async def drain(self, transport: ITransport) -> int:
        """
        Retry every queued event in FIFO order.

        Each event is removed as soon as its own delivery succeeds; a failure
        neither undoes earlier removals nor stops later attempts. Nothing
        happens when the queue is empty or the collector is unreachable.

        Returns:
            Number of events delivered.
        """
        async with self._drain_lock:
            if not self._queue:
                return 0

            if not await transport.is_online():
                logger.debug("Collector offline, keeping %d queued events", len(self._queue))
                return 0

            delivered = 0
            for event in self.all():
                result = await transport.send(event)
                if result.success:
                    await self.remove(event.event_id)
                    delivered += 1

            logger.info(
                "Queue drained",
                extra={"context": {"delivered": delivered, "remaining": len(self._queue)}},
            )
            return delivered

    def _encode(self) -> str:
        """JSON array of the queue; entries that cannot be encoded are dropped."""
        entries: list[str] = []
        kept: list[TelemetryEvent] = []
        for event in self._queue:
            try:
                entries.append(dumps_wire(event_to_wire(event)))
            except (TypeError, ValueError) as e:
                logger.warning("Dropping queued event %s that cannot be encoded: %s", event.event_id, e)
                continue
            kept.append(event)

        self._queue = kept
        return "[" + ",".join(entries) + "]"

    async def _save(self) -> None:
        try:
            await self._storage.set(self._storage_key, self._encode())
        except Exception as e:
            logger.error("Failed to save queue to storage: %s", e, exc_info=True)
