"""BreadcrumbBuffer implementation."""

from collections import deque
from dataclasses import replace
from datetime import datetime, timezone

from ..models import Breadcrumb


class BreadcrumbBuffer:
    """Fixed-capacity log of recent breadcrumbs, oldest first."""

    def __init__(self, max_breadcrumbs: int = 100):
        self._max_breadcrumbs = max_breadcrumbs
        # deque drops the single oldest entry when a new one exceeds maxlen
        self._breadcrumbs: deque[Breadcrumb] = deque(maxlen=max(0, max_breadcrumbs))

    @property
    def max_breadcrumbs(self) -> int:
        return self._max_breadcrumbs

    def add(self, breadcrumb: Breadcrumb) -> None:
        """Append a breadcrumb, stamping it with the current time if needed."""
        self._breadcrumbs.append(
            replace(
                breadcrumb,
                timestamp=breadcrumb.timestamp or datetime.now(timezone.utc),
                data=dict(breadcrumb.data) if breadcrumb.data is not None else None,
            )
        )

    def snapshot(self) -> list[Breadcrumb]:
        """Copy of all breadcrumbs in insertion order."""
        return [
            replace(b, data=dict(b.data) if b.data is not None else None)
            for b in self._breadcrumbs
        ]

    def clear(self) -> None:
        """Clear the buffer."""
        self._breadcrumbs.clear()

    @property
    def count(self) -> int:
        return len(self._breadcrumbs)

    def __len__(self) -> int:
        return len(self._breadcrumbs)
