"""HTTP API module."""

from .app import create_fastapi_app
from .server import TraceListener

__all__ = ["create_fastapi_app", "TraceListener"]
