"""MockSpansCollector: receive OTLP spans and assert on them in tests."""

from contextlib import aclosing

import httpx
from fastapi import FastAPI

from .api import TraceListener, create_fastapi_app
from .buffer import BoundedQueue
from .config import (
    HEALTHZ_PATH,
    TRACES_PATH,
    Number,
    resolve_capacity,
    resolve_host,
    resolve_port,
    resolve_timeout,
)
from .errors import (
    CollectorClosedError,
    CollectorStartupError,
    ExpectationsNotSetError,
    MatchFailure,
    UnexpectedSpanError,
)
from .expectations import ExpectationRegistry, format_report, reconcile
from .ingestion import SpanSink
from .logging_config import get_logger
from .models import CollectedSpan, SpanPredicate
from .resources import ResourceExpector

logger = get_logger(__name__)


class MockSpansCollector:
    """
    OTLP/HTTP trace receiver with span expectations.

    Usage:
        async with MockSpansCollector() as collector:
            collector.expect("my.library", lambda span: span.name == "work")
            ...  # point the system under test at collector.endpoint
            await collector.assert_expectations(timeout=5)
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        capacity: int | None = None,
        default_timeout: Number | None = None,
    ):
        self._host = resolve_host(host)
        self._port = resolve_port(port)
        self._default_timeout = resolve_timeout(default_timeout)

        self._spans: BoundedQueue[CollectedSpan] = BoundedQueue(resolve_capacity(capacity))
        self._expectations = ExpectationRegistry()
        self.resource_expector = ResourceExpector()
        self._sink = SpanSink(self._spans, self.resource_expector)

        self._app: FastAPI | None = None
        self._listener: TraceListener | None = None
        self._disposed = False

    @property
    def app(self) -> FastAPI:
        """HTTP application feeding this collector (built on first use)."""
        if self._app is None:
            self._app = create_fastapi_app(self._sink)
        return self._app

    @property
    def spans(self) -> BoundedQueue[CollectedSpan]:
        """Queue of collected spans."""
        return self._spans

    @property
    def port(self) -> int:
        """TCP port the listener is bound to."""
        if not self._listener:
            raise RuntimeError("Collector not started")
        return self._listener.port

    @property
    def endpoint(self) -> str:
        """Full OTLP/HTTP traces URL to hand to an exporter."""
        return f"http://{self._host}:{self.port}{TRACES_PATH}"

    async def start(self) -> "MockSpansCollector":
        """Start the listener and verify it answers health checks."""
        if self._disposed:
            raise CollectorClosedError("Collector is disposed")
        if self._listener:
            return self

        self._listener = TraceListener(self.app, self._host, self._port)
        try:
            await self._listener.start()
            healthy = await self._verify_healthz()
        except CollectorStartupError:
            await self.dispose()
            raise

        if not healthy:
            await self.dispose()
            raise CollectorStartupError("Cannot start MockSpansCollector!")

        logger.info("Listening on %s", self.endpoint)
        return self

    async def _verify_healthz(self) -> bool:
        url = f"http://{self._host}:{self.port}{HEALTHZ_PATH}"
        async with httpx.AsyncClient(trust_env=False) as client:
            try:
                response = await client.get(url, timeout=5.0)
            except httpx.HTTPError as e:
                logger.error("Health check failed: %s", e)
                return False
        return response.status_code == 200

    def expect(
        self,
        scope_name: str,
        predicate: SpanPredicate | None = None,
        description: str | None = None,
    ) -> None:
        """Expect at least one span from scope_name satisfying predicate."""
        self._expectations.add(scope_name, predicate, description)

    async def assert_expectations(self, timeout: Number | None = None) -> None:
        """
        Wait until every expectation is met by a distinct span.

        Args:
            timeout: Seconds to wait. Defaults to the collector's default
                     timeout. A non-positive value fails immediately.

        Raises:
            ExpectationsNotSetError: no expectation was declared.
            MatchFailure: the wait ended first; the message lists missing
                          expectations, matched spans and additional spans.
            CollectorClosedError: the collector was disposed while waiting.
        """
        if len(self._expectations) == 0:
            raise ExpectationsNotSetError("Expectations were not set")

        if timeout is None:
            timeout = self._default_timeout

        async with aclosing(self._spans.consume(timeout)) as spans:
            outcome = await reconcile(self._expectations.snapshot(), spans)

        if not outcome.satisfied:
            report = format_report(outcome)
            logger.warning(
                "Expectations not met",
                extra={
                    "context": {
                        "missing": len(outcome.missing),
                        "met": len(outcome.met),
                        "extra": len(outcome.extra),
                        "missing_descriptions": [e.description for e in outcome.missing],
                        "timeout": timeout,
                    }
                },
            )
            raise MatchFailure(outcome, report)

    async def assert_empty(self, timeout: Number | None = None) -> None:
        """Fail if any span arrives within timeout."""
        if timeout is None:
            timeout = self._default_timeout

        collected = await self._spans.try_take(timeout)
        if collected is not None:
            raise UnexpectedSpanError(collected)

    async def dispose(self) -> None:
        """Release the queue and stop the listener. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True

        logger.info("Shutting down.")
        self.resource_expector.dispose()
        await self._spans.close()
        if self._listener:
            await self._listener.stop()

    async def __aenter__(self) -> "MockSpansCollector":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()
