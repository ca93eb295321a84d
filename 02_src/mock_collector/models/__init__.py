"""Core data models for the mock collector."""

from .spans import NO_DESCRIPTION, CollectedSpan, Expectation, SpanPredicate, always_true

__all__ = [
    "CollectedSpan",
    "Expectation",
    "SpanPredicate",
    "NO_DESCRIPTION",
    "always_true",
]
