"""Journey and Step state machine."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from ..config import generate_event_id
from ..models import JourneyContext, JourneyStatus, JourneyStep, StepStatus, User


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Journey:
    """
    A named correlation scope spanning several steps.

    At most one step is in progress at any time: starting a step completes
    the previous one first. Completing or failing the journey carries the
    in-progress step into the same terminal status.
    """

    def __init__(self, name: str):
        self._id = generate_event_id()
        self._name = name
        self._started_at = _now()
        self._metadata: dict[str, Any] = {}
        self._user: User | None = None
        self._steps: list[JourneyStep] = []
        self._current_step: JourneyStep | None = None
        self._status = JourneyStatus.ACTIVE

    def set_user(
        self, id: str, email: str | None = None, data: dict[str, Any] | None = None
    ) -> "Journey":
        """Set user context for this journey."""
        self._user = User(id=id, email=email, data=dict(data) if data else data)
        return self

    def set_metadata(self, key: str, value: Any) -> "Journey":
        """Set a metadata entry for this journey."""
        self._metadata[key] = value
        return self

    def start_step(self, name: str, category: str | None = None) -> "Step":
        """Start a new step, completing the current one if it is still running."""
        self._finish_current_step(StepStatus.COMPLETED)

        step = JourneyStep(name=name, category=category, started_at=_now())
        self._steps.append(step)
        self._current_step = step

        return Step(step, self)

    def complete(self) -> None:
        """Mark the journey as completed."""
        self._finish_current_step(StepStatus.COMPLETED)
        self._status = JourneyStatus.COMPLETED

    def fail(self) -> None:
        """Mark the journey as failed."""
        self._finish_current_step(StepStatus.FAILED)
        self._status = JourneyStatus.FAILED

    def _finish_current_step(self, status: StepStatus) -> None:
        step = self._current_step
        if step is not None and step.status == StepStatus.IN_PROGRESS:
            step.status = status
            step.ended_at = _now()

    def snapshot(self) -> JourneyContext:
        """Journey context to attach to an event."""
        return JourneyContext(
            journey_id=self._id,
            name=self._name,
            started_at=self._started_at,
            current_step=self._current_step.name if self._current_step else None,
            metadata=dict(self._metadata),
        )

    def get_user(self) -> User | None:
        """Journey-scoped user, if one was set."""
        return self._user

    @property
    def journey_id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def started_at(self) -> datetime:
        return self._started_at

    @property
    def status(self) -> JourneyStatus:
        return self._status

    @property
    def is_complete(self) -> bool:
        return self._status != JourneyStatus.ACTIVE

    @property
    def current_step(self) -> str | None:
        return self._current_step.name if self._current_step else None

    @property
    def steps(self) -> list[JourneyStep]:
        """Copies of all steps in start order."""
        return [replace(s, data=dict(s.data)) for s in self._steps]


class Step:
    """Handle to a step within a journey.

    Terminal transitions are last-write-wins: calling complete() or fail()
    again re-stamps the end time and overwrites the status.
    """

    def __init__(self, step: JourneyStep, journey: Journey):
        self._step = step
        self._journey = journey

    def set_data(self, key: str, value: Any) -> "Step":
        """Set a data entry for this step."""
        self._step.data[key] = value
        return self

    def complete(self) -> None:
        """Mark the step as completed."""
        self._step.status = StepStatus.COMPLETED
        self._step.ended_at = _now()

    def fail(self) -> None:
        """Mark the step as failed."""
        self._step.status = StepStatus.FAILED
        self._step.ended_at = _now()

    @property
    def name(self) -> str:
        return self._step.name

    @property
    def category(self) -> str | None:
        return self._step.category

    @property
    def status(self) -> StepStatus:
        return self._step.status

    @property
    def started_at(self) -> datetime:
        return self._step.started_at

    @property
    def ended_at(self) -> datetime | None:
        return self._step.ended_at

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._step.data)

    def get_journey(self) -> Journey:
        """Get the parent journey."""
        return self._journey
