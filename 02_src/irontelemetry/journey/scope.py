"""Scope guards that finish journeys and steps on every exit path."""

from typing import Any, Callable

from ..models import StepStatus
from .journey import Journey, Step


class JourneyScope:
    """
    Completes its journey when the scope exits.

    Usable as ``with`` / ``async with``; entering yields the Journey. On exit,
    normal or exceptional, the journey is completed if still active and the
    detach callback runs. Exceptions are never suppressed.
    """

    def __init__(self, journey: Journey, on_complete: Callable[[], None] | None = None):
        self._journey = journey
        self._on_complete = on_complete

    def get_journey(self) -> Journey:
        return self._journey

    def close(self) -> None:
        """Run the exit routine explicitly."""
        try:
            if not self._journey.is_complete:
                self._journey.complete()
        finally:
            if self._on_complete is not None:
                self._on_complete()

    def __enter__(self) -> Journey:
        return self._journey

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    async def __aenter__(self) -> Journey:
        return self._journey

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


class StepScope:
    """Completes its step when the scope exits, if still in progress."""

    def __init__(self, step: Step):
        self._step = step

    def get_step(self) -> Step:
        return self._step

    def set_data(self, key: str, value: Any) -> "StepScope":
        self._step.set_data(key, value)
        return self

    def close(self) -> None:
        """Run the exit routine explicitly."""
        if self._step.status == StepStatus.IN_PROGRESS:
            self._step.complete()

    def __enter__(self) -> Step:
        return self._step

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    async def __aenter__(self) -> Step:
        return self._step

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
