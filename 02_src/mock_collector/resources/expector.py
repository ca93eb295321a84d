"""ResourceExpector implementation for checking resource attributes."""

import asyncio
from collections import deque
from typing import Any, Protocol

from opentelemetry.proto.resource.v1.resource_pb2 import Resource

from ..config import DEFAULT_WAIT_TIMEOUT
from ..errors import CollectorClosedError, ExpectationsNotSetError, ResourceMismatchError
from ..logging_config import get_logger
from ..otlp import attributes_to_dict

logger = get_logger(__name__)

MAX_SNAPSHOTS = 10


class IResourceExpector(Protocol):
    """Receives the resource of every resource group the collector ingests."""

    def collect(self, resource: Resource) -> None:
        """Record one resource snapshot."""
        ...

    def dispose(self) -> None:
        """Release waiters and stop accepting snapshots."""
        ...


class ResourceExpector:
    """Keeps recent resource snapshots and checks expected attributes on the latest."""

    def __init__(self, max_snapshots: int = MAX_SNAPSHOTS):
        self._snapshots: deque[Resource] = deque(maxlen=max_snapshots)
        self._expected: dict[str, Any] = {}
        self._arrived = asyncio.Event()
        self._disposed = False

    def expect(self, key: str, value: Any) -> None:
        """Expect the resource to carry attribute key with value."""
        self._expected[key] = value

    def collect(self, resource: Resource) -> None:
        """Record one resource snapshot. Never blocks."""
        if self._disposed:
            raise CollectorClosedError("Resource expector is disposed")

        self._snapshots.append(resource)
        self._arrived.set()

    @property
    def snapshots(self) -> list[Resource]:
        """Collected snapshots, oldest first."""
        return list(self._snapshots)

    async def assert_expectations(self, timeout: float | None = None) -> None:
        """
        Wait for a resource and check the latest one against expectations.

        Raises:
            ExpectationsNotSetError: nothing was expected.
            ResourceMismatchError: no resource arrived in time, or attributes differ.
            CollectorClosedError: the expector was disposed.
        """
        if not self._expected:
            raise ExpectationsNotSetError("Resource expectations were not set")

        if timeout is None:
            timeout = DEFAULT_WAIT_TIMEOUT

        if self._disposed:
            raise CollectorClosedError("Resource expector is disposed")

        if not self._arrived.is_set() and timeout > 0:
            try:
                await asyncio.wait_for(self._arrived.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                pass

        if self._disposed:
            raise CollectorClosedError("Resource expector is disposed")

        if not self._snapshots:
            raise ResourceMismatchError(f"No resource collected within {timeout}s")

        actual = attributes_to_dict(self._snapshots[-1].attributes)
        missing = {k: v for k, v in self._expected.items() if k not in actual}
        mismatched = {
            k: v for k, v in self._expected.items() if k in actual and actual[k] != v
        }

        if missing or mismatched:
            raise ResourceMismatchError(_format_report(missing, mismatched, actual))

    def dispose(self) -> None:
        """Release waiters and stop accepting snapshots."""
        if self._disposed:
            return
        self._disposed = True
        self._snapshots.clear()
        self._arrived.set()
        logger.debug("Resource expector disposed")


def _format_report(
    missing: dict[str, Any],
    mismatched: dict[str, Any],
    actual: dict[str, Any],
) -> str:
    lines = [""]

    lines.append("Missing resource attributes:")
    for key, value in missing.items():
        lines.append(f"  - {key} = {value!r}")

    lines.append("Mismatched resource attributes:")
    for key, value in mismatched.items():
        lines.append(f"  ~ {key}: expected {value!r}, got {actual[key]!r}")

    lines.append("Actual resource attributes:")
    for key, value in actual.items():
        lines.append(f"    {key} = {value!r}")

    return "\n".join(lines) + "\n"
