"""Collector configuration and environment helpers."""

import os
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "collector.log"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 0  # ephemeral
DEFAULT_WAIT_TIMEOUT = 60.0  # seconds
DEFAULT_QUEUE_CAPACITY = 100  # bounded to avoid memory growth

TRACES_PATH = "/v1/traces"
HEALTHZ_PATH = "/healthz"

Number = Union[int, float]


def resolve_host(value: str | None = None) -> str:
    """Resolve the listener host: argument, then MOCK_COLLECTOR_HOST, then default."""
    return value or os.getenv("MOCK_COLLECTOR_HOST") or DEFAULT_HOST


def resolve_port(value: int | None = None) -> int:
    """Resolve the listener port. 0 lets the OS pick a free one."""
    if value is not None:
        return value
    return int(os.getenv("MOCK_COLLECTOR_PORT", str(DEFAULT_PORT)))


def resolve_timeout(value: Number | None = None) -> float:
    """Resolve the default wait timeout in seconds."""
    if value is not None:
        return float(value)
    return float(os.getenv("MOCK_COLLECTOR_TIMEOUT", str(DEFAULT_WAIT_TIMEOUT)))


def resolve_capacity(value: int | None = None) -> int:
    """Resolve the span queue capacity."""
    if value is None:
        value = int(os.getenv("MOCK_COLLECTOR_CAPACITY", str(DEFAULT_QUEUE_CAPACITY)))
    if value < 1:
        raise ValueError(f"Queue capacity must be positive, got {value}")
    return value
