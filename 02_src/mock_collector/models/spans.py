"""Span-related data models."""

from dataclasses import dataclass, field
from typing import Callable

from google.protobuf import json_format
from opentelemetry.proto.trace.v1.trace_pb2 import Span

SpanPredicate = Callable[[Span], bool]

NO_DESCRIPTION = "<no description>"


def always_true(span: Span) -> bool:
    """Default predicate: accept every span."""
    return True


@dataclass(frozen=True)
class CollectedSpan:
    """One ingested span with the name of the scope that produced it."""

    scope_name: str
    span: Span

    def __str__(self) -> str:
        rendered = json_format.MessageToJson(self.span, indent=None)
        return f"scope_name={self.scope_name}, span={rendered}"


@dataclass(frozen=True)
class Expectation:
    """A span a test wants to see at least once."""

    scope_name: str
    predicate: SpanPredicate = field(default=always_true)
    description: str = NO_DESCRIPTION
