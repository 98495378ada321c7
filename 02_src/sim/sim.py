"""SIM: scripted checkout scenario reported through a TelemetryClient."""

import asyncio
import os
import random
from pathlib import Path
from typing import Protocol

from dotenv import load_dotenv

from irontelemetry import (
    BreadcrumbCategory,
    SeverityLevel,
    TelemetryClient,
    TelemetryOptions,
    track_step_async,
)
from irontelemetry.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


class PaymentDeclined(Exception):
    """Raised by the scenario when a simulated payment fails."""


class ISim(Protocol):
    """Generate telemetry for a hardcoded scenario."""

    async def run(self) -> None:
        """Run the scenario once."""
        ...


class Sim:
    """Virtual shoppers going through a checkout journey."""

    def __init__(
        self,
        client: TelemetryClient,
        failure_rate: float = 0.3,
        delay: float = 0.0,
    ):
        self._client = client
        self._failure_rate = failure_rate
        self._delay = delay
        self._rng = random.Random()

    async def run(self) -> None:
        """Run the scenario for every virtual user."""
        virtual_users = [
            {"user_id": "user_001", "email": "alice@example.com"},
            {"user_id": "user_002", "email": "bob@example.com"},
            {"user_id": "user_003", "email": "charlie@example.com"},
        ]

        for user in virtual_users:
            await self._run_checkout(user["user_id"], user["email"])
            await asyncio.sleep(self._delay)

        delivered = await self._client.flush()
        logger.info("SIM: flushed %d queued events", delivered)

    async def _run_checkout(self, user_id: str, email: str) -> None:
        client = self._client
        client.set_user(user_id, email)
        client.set_tag("scenario", "checkout")

        with client.start_journey("checkout") as journey:
            journey.set_metadata("cart_size", self._rng.randint(1, 5))

            client.add_breadcrumb("Opened cart", BreadcrumbCategory.NAVIGATION)
            await track_step_async(client, "validate", self._validate, category="business")

            client.add_breadcrumb("Submitted payment", BreadcrumbCategory.UI)
            try:
                await track_step_async(client, "pay", self._pay, category="business")
            except PaymentDeclined as e:
                journey.fail()
                result = await client.capture_exception(e, {"user_id": user_id})
                logger.info("SIM: %s payment failure -> %s", user_id, result)
                return

        result = await client.capture_message("Checkout completed", SeverityLevel.INFO)
        logger.info("SIM: %s checkout -> %s", user_id, result)

    async def _validate(self) -> None:
        await asyncio.sleep(self._delay)

    async def _pay(self) -> None:
        await asyncio.sleep(self._delay)
        if self._rng.random() < self._failure_rate:
            raise PaymentDeclined("Card declined")


async def run_from_env() -> None:
    """Run the scenario against IRONTELEMETRY_DSN."""
    project_root = Path(__file__).resolve().parent.parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    options = TelemetryOptions.from_env(
        flush_interval=float(os.getenv("SIM_FLUSH_INTERVAL", "5")),
    )
    async with TelemetryClient(options) as client:
        await Sim(client, delay=1.0).run()


if __name__ == "__main__":
    asyncio.run(run_from_env())
