"""SpanSink implementation."""

from typing import Protocol

from opentelemetry.proto.collector.trace.v1.trace_service_pb2 import (
    ExportTraceServiceRequest,
)

from ..buffer import IBoundedQueue
from ..logging_config import get_logger
from ..models import CollectedSpan
from ..resources import IResourceExpector

logger = get_logger(__name__)


class ISpanSink(Protocol):
    """Turns decoded export requests into collected spans."""

    async def ingest(self, request: ExportTraceServiceRequest) -> int:
        """Push every span of the request into the queue. Return the count."""
        ...


class SpanSink:
    """Flattens resource groups -> scope groups -> spans into the span queue."""

    def __init__(
        self,
        queue: IBoundedQueue[CollectedSpan],
        resource_expector: IResourceExpector,
    ):
        self._queue = queue
        self._resource_expector = resource_expector

    async def ingest(self, request: ExportTraceServiceRequest) -> int:
        """
        Push every span of the request into the queue. Return the count.

        The resource expector hears about each resource group once, even
        when the group carries no spans. Pushing waits while the queue is
        full and raises CollectorClosedError if the queue is closed.
        """
        count = 0
        for resource_spans in request.resource_spans:
            self._resource_expector.collect(resource_spans.resource)

            for scope_spans in resource_spans.scope_spans:
                for span in scope_spans.spans:
                    await self._queue.push(
                        CollectedSpan(scope_name=scope_spans.scope.name, span=span)
                    )
                    count += 1

        logger.debug(
            "Ingested %d spans from %d resource groups",
            count,
            len(request.resource_spans),
        )
        return count
