"""Journey module."""

from .journey import Journey, Step
from .scope import JourneyScope, StepScope

__all__ = ["Journey", "Step", "JourneyScope", "StepScope"]
