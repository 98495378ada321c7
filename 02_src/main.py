"""Run the IronTelemetry development collector."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from irontelemetry.collector import create_collector_app
from irontelemetry.logging_config import setup_logging


def main():
    """Run the collector."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    # Get configuration from environment
    host = os.getenv("COLLECTOR_HOST", "localhost")
    port = int(os.getenv("COLLECTOR_PORT", "8000"))
    keys = os.getenv("COLLECTOR_PUBLIC_KEYS")
    public_keys = {k.strip() for k in keys.split(",") if k.strip()} if keys else None

    app = create_collector_app(public_keys=public_keys)

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
