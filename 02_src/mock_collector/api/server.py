"""In-process uvicorn listener running on the caller's event loop."""

import asyncio

import uvicorn
from fastapi import FastAPI

from ..errors import CollectorStartupError
from ..logging_config import get_logger

logger = get_logger(__name__)

STARTUP_TIMEOUT = 10.0  # seconds
GRACEFUL_SHUTDOWN_TIMEOUT = 5  # seconds


class TraceListener:
    """Serves a FastAPI app from a background task."""

    def __init__(self, app: FastAPI, host: str, port: int):
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            log_level="warning",
            lifespan="off",
            timeout_graceful_shutdown=GRACEFUL_SHUTDOWN_TIMEOUT,
        )
        self._server = uvicorn.Server(config)
        self._task: asyncio.Task | None = None

    async def start(self, timeout: float = STARTUP_TIMEOUT) -> None:
        """Start serving and wait until the socket is bound."""
        if self._task is not None:
            return

        self._task = asyncio.create_task(self._serve())

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not self._server.started:
            if self._task.done():
                # Surfaces the startup error, if any
                self._task.result()
                raise CollectorStartupError("Listener exited during startup")
            if loop.time() > deadline:
                raise CollectorStartupError(f"Listener not started within {timeout}s")
            await asyncio.sleep(0.01)

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it cannot bind
            raise CollectorStartupError(f"Listener failed to start (exit code {e.code})") from e

    @property
    def port(self) -> int:
        """Bound TCP port."""
        if not self._server.started:
            raise RuntimeError("Listener not started")
        sockets = self._server.servers[0].sockets
        return sockets[0].getsockname()[1]

    async def stop(self) -> None:
        """Ask uvicorn to exit and wait for it."""
        if self._task is None:
            return

        self._server.should_exit = True
        task, self._task = self._task, None
        try:
            await task
        except CollectorStartupError as e:
            logger.warning("Listener stopped after failed start: %s", e)
