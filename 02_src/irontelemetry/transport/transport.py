"""HTTP transport for delivering events to the collector."""

from typing import Protocol

import httpx

from ..logging_config import get_logger
from ..models import SendResult, TelemetryEvent, dumps_wire, event_to_wire

logger = get_logger(__name__)

EVENTS_PATH = "/api/v1/events"
HEALTH_PATH = "/api/v1/health"


class ITransport(Protocol):
    """Network exchange with the collector. Never raises, never retries."""

    async def send(self, event: TelemetryEvent) -> SendResult:
        """Post one serialized event."""
        ...

    async def is_online(self) -> bool:
        """Probe collector reachability."""
        ...


class HttpTransport:
    """Transport built on httpx.AsyncClient."""

    def __init__(
        self,
        api_base_url: str,
        public_key: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_base_url = api_base_url.rstrip("/")
        self._public_key = public_key
        self._timeout = timeout
        # Only clients created here are closed by close()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def events_url(self) -> str:
        return f"{self._api_base_url}{EVENTS_PATH}"

    @property
    def health_url(self) -> str:
        return f"{self._api_base_url}{HEALTH_PATH}"

    async def send(self, event: TelemetryEvent) -> SendResult:
        """Send an event to the collector."""
        try:
            response = await self._client.post(
                self.events_url,
                content=dumps_wire(event_to_wire(event)),
                headers={
                    "Content-Type": "application/json",
                    "X-Public-Key": self._public_key,
                },
                timeout=self._timeout,
            )
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.debug("Failed to send event %s: %s", event.event_id, error)
            return SendResult(success=False, error=error)

        if not response.is_success:
            error = f"HTTP {response.status_code}: {response.text}"
            logger.debug("Failed to send event %s: %s", event.event_id, error)
            return SendResult(success=False, error=error)

        event_id = event.event_id
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("eventId"):
            event_id = body["eventId"]

        logger.debug("Event sent successfully: %s", event_id)
        return SendResult(success=True, event_id=event_id)

    async def is_online(self) -> bool:
        """Check if the collector is reachable."""
        try:
            response = await self._client.get(
                self.health_url,
                headers={"X-Public-Key": self._public_key},
                timeout=self._timeout,
            )
        except Exception as e:
            logger.debug("Health probe failed: %s", e)
            return False
        return response.is_success

    async def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
