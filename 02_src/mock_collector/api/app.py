"""FastAPI application setup."""

from fastapi import FastAPI

from ..ingestion import ISpanSink
from .routes import health, traces


def create_fastapi_app(sink: ISpanSink) -> FastAPI:
    """Create the collector's HTTP application around a span sink."""
    fastapi_app = FastAPI(
        title="Mock Spans Collector",
        description="OTLP/HTTP trace receiver for integration tests",
        version="0.1.0",
    )

    fastapi_app.include_router(traces.create_traces_router(sink))
    fastapi_app.include_router(health.create_health_router())

    return fastapi_app
