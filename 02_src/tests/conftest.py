"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from irontelemetry.models import (  # noqa: E402
    PlatformInfo,
    SendResult,
    SeverityLevel,
    TelemetryEvent,
)

TEST_DSN = "https://pk_test_123@collector.example.com"
TEST_PUBLIC_KEY = "pk_test_123"
TEST_BASE_URL = "https://collector.example.com"


class FakeTransport:
    """Records delivery attempts; success decided per event."""

    def __init__(
        self,
        online: bool = True,
        succeed: bool | Callable[[TelemetryEvent], bool] = True,
    ):
        self.online = online
        self.succeed = succeed
        self.sent: list[TelemetryEvent] = []
        self.probes = 0

    async def send(self, event: TelemetryEvent) -> SendResult:
        self.sent.append(event)
        ok = self.succeed(event) if callable(self.succeed) else self.succeed
        if ok:
            return SendResult(success=True, event_id=event.event_id)
        return SendResult(success=False, error="HTTP 503: unavailable")

    async def is_online(self) -> bool:
        self.probes += 1
        return self.online


def make_event(event_id: str, message: str | None = None, **kwargs) -> TelemetryEvent:
    """Build a minimal event for queue and transport tests."""
    values = {
        "event_id": event_id,
        "timestamp": datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        "level": SeverityLevel.ERROR,
        "message": message or f"event {event_id}",
        "platform": PlatformInfo(name="python", version="3.12.0", os="linux"),
    }
    values.update(kwargs)
    return TelemetryEvent(**values)


@pytest.fixture
def event_factory():
    """Expose make_event as a fixture."""
    return make_event


@pytest_asyncio.fixture
async def storage():
    """Create in-memory SQLite storage for testing."""
    from irontelemetry.storage import SQLiteStorage

    st = SQLiteStorage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def memory_storage():
    """Dict-backed storage."""
    from irontelemetry.storage import MemoryStorage

    return MemoryStorage()


@pytest.fixture
def transport():
    """Online transport that accepts every event."""
    return FakeTransport()


@pytest.fixture
def offline_queue(storage):
    """Create OfflineQueue backed by SQLite storage."""
    from irontelemetry.queue import OfflineQueue

    return OfflineQueue(storage, max_size=10)


@pytest_asyncio.fixture
async def client_factory(memory_storage):
    """Create TelemetryClients with a fake transport; closed after the test."""
    from irontelemetry import TelemetryClient, TelemetryOptions

    created = []

    def factory(transport=None, storage=None, **option_overrides):
        options = TelemetryOptions(
            dsn=TEST_DSN,
            flush_interval=0,
            **option_overrides,
        )
        client = TelemetryClient(
            options,
            transport=transport or FakeTransport(),
            storage=storage or memory_storage,
        )
        created.append(client)
        return client

    yield factory

    for client in created:
        await client.aclose()
