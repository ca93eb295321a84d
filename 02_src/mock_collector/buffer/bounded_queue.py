"""Bounded FIFO queue with backpressure, timeouts and close."""

import asyncio
from collections import deque
from typing import AsyncIterator, Generic, Protocol, TypeVar

from ..config import DEFAULT_QUEUE_CAPACITY
from ..errors import CollectorClosedError, InvalidTimeoutError

T = TypeVar("T")


class IBoundedQueue(Protocol[T]):
    """Fixed-capacity channel between ingestion and matching."""

    async def push(self, item: T) -> None:
        """Enqueue item, waiting while the queue is full."""
        ...

    def consume(self, timeout: float | None = None) -> AsyncIterator[T]:
        """Yield items in arrival order until the deadline passes."""
        ...

    async def try_take(self, timeout: float) -> T | None:
        """Take one item within timeout, or return None."""
        ...

    async def close(self) -> None:
        """Close permanently and release every waiter."""
        ...


class BoundedQueue(Generic[T]):
    """
    Bounded FIFO guarded by one lock and two conditions.

    Producers wait on ``not_full``, consumers on ``not_empty``. Closing wakes
    both sides; every waiter then raises CollectorClosedError.
    """

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Queue capacity must be positive, got {capacity}")

        self._capacity = capacity
        self._items: deque[T] = deque()
        self._lock = asyncio.Lock()
        self._not_full = asyncio.Condition(self._lock)
        self._not_empty = asyncio.Condition(self._lock)
        self._closed = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._items)

    def _ensure_open(self) -> None:
        if self._closed:
            raise CollectorClosedError("Queue is closed")

    async def push(self, item: T) -> None:
        """Enqueue item, waiting while the queue is full."""
        self._ensure_open()
        async with self._not_full:
            try:
                await self._not_full.wait_for(
                    lambda: self._closed or len(self._items) < self._capacity
                )
            except asyncio.CancelledError:
                # Hand a wake-up this producer may have consumed to the next one
                if not self._closed and len(self._items) < self._capacity:
                    self._not_full.notify()
                raise
            self._ensure_open()
            self._items.append(item)
            self._not_empty.notify()

    async def take(self, timeout: float | None = None) -> T:
        """
        Dequeue the oldest item, waiting while the queue is empty.

        Raises asyncio.TimeoutError if nothing arrives within ``timeout``
        seconds. Only the wait is ever cancelled, never the dequeue, so an
        item cannot be lost to a timeout.
        """
        self._ensure_open()
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        async with self._not_empty:
            while not self._closed and not self._items:
                if deadline is None:
                    await self._not_empty.wait()
                    continue

                remaining = deadline - loop.time()
                if not remaining > 0:
                    raise asyncio.TimeoutError(f"Nothing arrived within {timeout}s")
                try:
                    await asyncio.wait_for(self._not_empty.wait(), timeout=remaining)
                except asyncio.TimeoutError:
                    # An item that landed as the timer fired is still taken
                    if not self._closed and not self._items:
                        raise

            self._ensure_open()
            return self._pop()

    def _pop(self) -> T:
        item = self._items.popleft()
        # One slot freed, one producer woken
        self._not_full.notify()
        return item

    async def consume(self, timeout: float | None = None) -> AsyncIterator[T]:
        """
        Yield items in arrival order until the deadline passes.

        Each call starts a fresh sequence. The sequence never ends on its own:
        it raises asyncio.TimeoutError once ``timeout`` seconds have elapsed,
        InvalidTimeoutError for a non-positive or NaN timeout, and
        CollectorClosedError if the queue is closed.
        """
        if timeout is not None and not timeout > 0:
            raise InvalidTimeoutError(timeout)

        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        while True:
            if deadline is None:
                item = await self.take()
            else:
                remaining = deadline - loop.time()
                if not remaining > 0:
                    raise asyncio.TimeoutError(f"No more items within {timeout}s")
                item = await self.take(remaining)
            yield item

    async def try_take(self, timeout: float) -> T | None:
        """Take one item within timeout, or return None. Non-positive or NaN timeout polls."""
        if not timeout > 0:
            self._ensure_open()
            async with self._lock:
                return self._pop() if self._items else None

        try:
            return await self.take(timeout)
        except asyncio.TimeoutError:
            return None

    async def close(self) -> None:
        """Close permanently and release every waiter. Safe to call twice."""
        if self._closed:
            return

        async with self._lock:
            self._closed = True
            self._items.clear()
            self._not_full.notify_all()
            self._not_empty.notify_all()
