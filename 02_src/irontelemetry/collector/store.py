"""In-memory store of events received by the development collector."""

from .models import WireEvent


class EventStore:
    """Received events in arrival order, plus the public keys allowed to post."""

    def __init__(self, public_keys: set[str] | None = None):
        # None accepts any non-empty key
        self._public_keys = set(public_keys) if public_keys is not None else None
        self._events: list[WireEvent] = []

    def is_authorized(self, public_key: str | None) -> bool:
        if not public_key:
            return False
        if self._public_keys is None:
            return True
        return public_key in self._public_keys

    def add(self, event: WireEvent) -> None:
        self._events.append(event)

    def all(self) -> list[WireEvent]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()
