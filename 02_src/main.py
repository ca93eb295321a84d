"""Run a standalone mock collector that logs every span it receives."""

import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv

from mock_collector import MockSpansCollector
from mock_collector.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

POLL_INTERVAL = 1.0  # seconds
STANDALONE_PORT = "4318"  # OTLP/HTTP default


async def run() -> None:
    """Start the collector and drain spans until interrupted."""
    port = int(os.getenv("MOCK_COLLECTOR_PORT", STANDALONE_PORT))

    async with MockSpansCollector(port=port) as collector:
        logger.info("Export traces to %s", collector.endpoint)
        while True:
            collected = await collector.spans.try_take(POLL_INTERVAL)
            if collected is not None:
                logger.info("Received span: %s", collected)


def main():
    """Run the collector."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
