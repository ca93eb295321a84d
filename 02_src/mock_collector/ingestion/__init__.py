"""Ingestion module."""

from .sink import ISpanSink, SpanSink

__all__ = ["ISpanSink", "SpanSink"]
