"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest
import pytest_asyncio
from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import (
    ExportTraceServiceRequest,
)
from opentelemetry.proto.common.v1.common_pb2 import (
    AnyValue,
    InstrumentationScope,
    KeyValue,
)
from opentelemetry.proto.resource.v1.resource_pb2 import Resource
from opentelemetry.proto.trace.v1.trace_pb2 import ResourceSpans, ScopeSpans, Span

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def _any_value(value) -> AnyValue:
    if isinstance(value, bool):
        return AnyValue(bool_value=value)
    if isinstance(value, int):
        return AnyValue(int_value=value)
    if isinstance(value, float):
        return AnyValue(double_value=value)
    return AnyValue(string_value=str(value))


def _key_values(attributes: dict | None) -> list[KeyValue]:
    return [KeyValue(key=k, value=_any_value(v)) for k, v in (attributes or {}).items()]


def build_span(name: str, **attributes) -> Span:
    """Span with a name and flat attributes."""
    return Span(name=name, attributes=_key_values(attributes))


def build_request(
    scopes: dict[str, list[Span]],
    resource: dict | None = None,
) -> ExportTraceServiceRequest:
    """Export request with one resource group and one scope group per key."""
    return ExportTraceServiceRequest(
        resource_spans=[
            ResourceSpans(
                resource=Resource(attributes=_key_values(resource)),
                scope_spans=[
                    ScopeSpans(scope=InstrumentationScope(name=scope), spans=spans)
                    for scope, spans in scopes.items()
                ],
            )
        ]
    )


@pytest.fixture
def make_span():
    """Factory for OTLP spans."""
    return build_span


@pytest.fixture
def make_request():
    """Factory for export requests."""
    return build_request


@pytest.fixture
def span_queue():
    """Create a small bounded queue."""
    from mock_collector.buffer import BoundedQueue

    return BoundedQueue(capacity=3)


@pytest.fixture
def resource_expector():
    """Create a resource expector."""
    from mock_collector.resources import ResourceExpector

    expector = ResourceExpector()
    yield expector
    expector.dispose()


@pytest.fixture
def mock_resource_expector():
    """Create mock resource expector."""
    expector = Mock()
    expector.collect = Mock()
    expector.dispose = Mock()
    return expector


@pytest.fixture
def sink(span_queue, mock_resource_expector):
    """Create SpanSink over the small queue."""
    from mock_collector.ingestion import SpanSink

    return SpanSink(span_queue, mock_resource_expector)


@pytest_asyncio.fixture
async def collector():
    """Create a collector that is not listening (use collector.app in-process)."""
    from mock_collector import MockSpansCollector

    col = MockSpansCollector(capacity=5, default_timeout=1.0)
    yield col
    await col.dispose()


@pytest_asyncio.fixture
async def running_collector():
    """Create and start a collector on an ephemeral port."""
    from mock_collector import MockSpansCollector

    col = MockSpansCollector(host="127.0.0.1", port=0, default_timeout=5.0)
    await col.start()
    yield col
    await col.dispose()
