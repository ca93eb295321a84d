"""Span buffer module."""

from .bounded_queue import BoundedQueue, IBoundedQueue

__all__ = ["BoundedQueue", "IBoundedQueue"]
