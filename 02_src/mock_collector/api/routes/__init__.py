"""API routes."""

from . import health, traces

__all__ = ["health", "traces"]
