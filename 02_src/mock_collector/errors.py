"""Collector exceptions.

Assertion-style failures subclass ``AssertionError`` so test runners report
them as failures rather than errors.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .expectations.matcher import MatchOutcome


class CollectorError(Exception):
    """Base class for all collector errors."""


class ExpectationsNotSetError(CollectorError, RuntimeError):
    """Verification was requested before any expectation was declared."""


class InvalidTimeoutError(CollectorError, ValueError):
    """A non-positive wait duration was supplied."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Timeout must be positive, got {timeout}")


class CollectorClosedError(CollectorError, RuntimeError):
    """Operation attempted against a disposed queue or collector."""


class CollectorStartupError(CollectorError, RuntimeError):
    """The HTTP listener did not come up."""


class MatchFailure(CollectorError, AssertionError):
    """Expectations were not met before the wait ended."""

    def __init__(self, outcome: "MatchOutcome", message: str):
        self.outcome = outcome
        super().__init__(message)


class UnexpectedSpanError(CollectorError, AssertionError):
    """A span arrived while none was expected."""

    def __init__(self, collected: object):
        self.collected = collected
        super().__init__(f"Expected nothing, but got: {collected}")


class ResourceMismatchError(CollectorError, AssertionError):
    """Collected resource attributes did not match the expected ones."""
