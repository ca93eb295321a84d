"""Tests for BoundedQueue."""

import asyncio
import math

import pytest

from mock_collector.buffer import BoundedQueue
from mock_collector.errors import CollectorClosedError, InvalidTimeoutError


async def _collect(queue: BoundedQueue, count: int, timeout: float = 1.0) -> list:
    items = []
    async for item in queue.consume(timeout):
        items.append(item)
        if len(items) == count:
            break
    return items


class TestBoundedQueueOrdering:
    """Tests for FIFO delivery."""

    @pytest.mark.asyncio
    async def test_consume_yields_in_push_order(self, span_queue):
        """Test that items come out in the order they went in."""
        for item in ("a", "b", "c"):
            await span_queue.push(item)

        assert await _collect(span_queue, 3) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_consume_is_fresh_per_call(self, span_queue):
        """Test that a second consume continues where the first stopped."""
        for item in ("a", "b", "c"):
            await span_queue.push(item)

        assert await _collect(span_queue, 1) == ["a"]
        assert await _collect(span_queue, 2) == ["b", "c"]

    @pytest.mark.asyncio
    async def test_consume_waits_for_late_items(self, span_queue):
        """Test that consume picks up items pushed after it started waiting."""

        async def produce():
            await asyncio.sleep(0.05)
            await span_queue.push("late")

        producer = asyncio.create_task(produce())
        assert await _collect(span_queue, 1) == ["late"]
        await producer

    def test_capacity_must_be_positive(self):
        """Test that a zero capacity is rejected."""
        with pytest.raises(ValueError):
            BoundedQueue(capacity=0)


class TestBoundedQueueBackpressure:
    """Tests for producers waiting on a full queue."""

    @pytest.mark.asyncio
    async def test_push_waits_while_full(self, span_queue):
        """Test that pushing beyond capacity suspends until an item is taken."""
        for item in ("a", "b", "c"):
            await span_queue.push(item)

        blocked = asyncio.create_task(span_queue.push("d"))
        await asyncio.sleep(0.05)
        assert not blocked.done()
        assert len(span_queue) == span_queue.capacity

        assert await span_queue.try_take(0.1) == "a"
        await asyncio.wait_for(blocked, timeout=1.0)

        assert await _collect(span_queue, 3) == ["b", "c", "d"]

    @pytest.mark.asyncio
    async def test_take_wakes_one_producer(self):
        """Test that one freed slot admits exactly one waiting producer."""
        queue = BoundedQueue(capacity=1)
        await queue.push("a")

        producers = [asyncio.create_task(queue.push(item)) for item in ("b", "c")]
        await asyncio.sleep(0.01)

        assert await queue.try_take(0) == "a"
        await asyncio.sleep(0.01)

        assert sum(p.done() for p in producers) == 1
        assert len(queue) == 1

        assert await queue.try_take(0) == "b"
        await asyncio.wait_for(asyncio.gather(*producers), timeout=1.0)
        assert await queue.try_take(0) == "c"

    @pytest.mark.asyncio
    async def test_cancelled_producer_passes_wake_up_on(self):
        """Test that cancelling a woken producer does not strand the next one."""
        queue = BoundedQueue(capacity=1)
        await queue.push("a")

        first = asyncio.create_task(queue.push("b"))
        second = asyncio.create_task(queue.push("c"))
        await asyncio.sleep(0.01)

        assert await queue.try_take(0) == "a"
        first.cancel()

        await asyncio.wait_for(second, timeout=1.0)
        assert first.cancelled()
        assert await queue.try_take(0) == "c"

    @pytest.mark.asyncio
    async def test_no_item_is_dropped(self):
        """Test that many producers through a tiny queue lose nothing."""
        queue = BoundedQueue(capacity=2)

        async def produce(prefix: str):
            for i in range(10):
                await queue.push(f"{prefix}{i}")

        producers = [asyncio.create_task(produce(p)) for p in ("x", "y", "z")]
        items = await _collect(queue, 30, timeout=5.0)
        await asyncio.gather(*producers)

        assert sorted(items) == sorted(f"{p}{i}" for p in "xyz" for i in range(10))
        # Order within one producer is preserved
        assert [i for i in items if i.startswith("x")] == [f"x{i}" for i in range(10)]


class TestBoundedQueueTimeouts:
    """Tests for consume and try_take timeouts."""

    @pytest.mark.asyncio
    async def test_consume_raises_on_timeout(self, span_queue):
        """Test that an exhausted wait raises instead of ending silently."""
        await span_queue.push("a")
        seen = []

        with pytest.raises(asyncio.TimeoutError):
            async for item in span_queue.consume(0.05):
                seen.append(item)

        assert seen == ["a"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("timeout", [0, -1.0, math.nan])
    async def test_consume_rejects_non_positive_timeout(self, span_queue, timeout):
        """Test that a non-positive timeout is an InvalidTimeoutError."""
        with pytest.raises(InvalidTimeoutError):
            async for _ in span_queue.consume(timeout):
                pass

    @pytest.mark.asyncio
    async def test_try_take_returns_none_on_timeout(self, span_queue):
        """Test that try_take reports not-found instead of raising."""
        loop = asyncio.get_running_loop()
        started = loop.time()

        assert await span_queue.try_take(0.05) is None
        assert loop.time() - started >= 0.04

    @pytest.mark.asyncio
    async def test_try_take_zero_timeout_polls(self, span_queue):
        """Test that a zero timeout returns what is already queued."""
        assert await span_queue.try_take(0) is None

        await span_queue.push("a")
        assert await span_queue.try_take(0) == "a"

    @pytest.mark.asyncio
    async def test_try_take_nan_timeout_polls(self, span_queue):
        """Test that a NaN timeout polls instead of waiting forever."""
        assert await asyncio.wait_for(span_queue.try_take(math.nan), timeout=2.0) is None

        await span_queue.push("a")
        assert await asyncio.wait_for(span_queue.try_take(math.nan), timeout=2.0) == "a"

    @pytest.mark.asyncio
    async def test_take_nan_timeout_does_not_wait(self, span_queue):
        """Test that take with a NaN timeout fails at once on an empty queue."""
        loop = asyncio.get_running_loop()
        started = loop.time()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(span_queue.take(math.nan), timeout=2.0)

        assert loop.time() - started < 1.0


class TestBoundedQueueClose:
    """Tests for closing the queue."""

    @pytest.mark.asyncio
    async def test_close_releases_blocked_producer(self, span_queue):
        """Test that a producer waiting on a full queue fails on close."""
        for item in ("a", "b", "c"):
            await span_queue.push(item)

        blocked = asyncio.create_task(span_queue.push("d"))
        await asyncio.sleep(0.05)

        await span_queue.close()

        with pytest.raises(CollectorClosedError):
            await asyncio.wait_for(blocked, timeout=1.0)

    @pytest.mark.asyncio
    async def test_close_releases_blocked_consumer(self, span_queue):
        """Test that a consumer waiting on an empty queue fails on close."""
        waiting = asyncio.create_task(_collect(span_queue, 1, timeout=10.0))
        await asyncio.sleep(0.05)

        await span_queue.close()

        with pytest.raises(CollectorClosedError):
            await asyncio.wait_for(waiting, timeout=1.0)

    @pytest.mark.asyncio
    async def test_operations_after_close_fail(self, span_queue):
        """Test that push and take on a closed queue raise."""
        await span_queue.push("a")
        await span_queue.close()

        assert span_queue.closed
        with pytest.raises(CollectorClosedError):
            await span_queue.push("b")
        with pytest.raises(CollectorClosedError):
            await span_queue.take()
        with pytest.raises(CollectorClosedError):
            await span_queue.try_take(0)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, span_queue):
        """Test that closing twice is harmless."""
        await span_queue.close()
        await span_queue.close()

        assert span_queue.closed
