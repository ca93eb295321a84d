"""Mock OTLP spans collector for integration tests."""

from .buffer import BoundedQueue, IBoundedQueue
from .collector import MockSpansCollector
from .errors import (
    CollectorClosedError,
    CollectorError,
    CollectorStartupError,
    ExpectationsNotSetError,
    InvalidTimeoutError,
    MatchFailure,
    ResourceMismatchError,
    UnexpectedSpanError,
)
from .expectations import ExpectationRegistry, MatchOutcome, format_report, reconcile
from .ingestion import ISpanSink, SpanSink
from .models import CollectedSpan, Expectation, SpanPredicate
from .otlp import attributes_to_dict
from .resources import IResourceExpector, ResourceExpector

__all__ = [
    # Collector
    "MockSpansCollector",
    # Models
    "CollectedSpan",
    "Expectation",
    "SpanPredicate",
    "MatchOutcome",
    # Components
    "IBoundedQueue",
    "BoundedQueue",
    "ISpanSink",
    "SpanSink",
    "ExpectationRegistry",
    "IResourceExpector",
    "ResourceExpector",
    "reconcile",
    "format_report",
    "attributes_to_dict",
    # Errors
    "CollectorError",
    "CollectorClosedError",
    "CollectorStartupError",
    "ExpectationsNotSetError",
    "InvalidTimeoutError",
    "MatchFailure",
    "ResourceMismatchError",
    "UnexpectedSpanError",
]
