"""Structured logging configuration for the mock collector."""

import json
import logging
import logging.config
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

from .config import DEFAULT_LOG_PATH

_FALSE_VALUES = {"0", "false", "no", "off"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Collector events attach a ``context`` dict (match counts, missing
    expectation descriptions, listener endpoints); it is emitted as a nested
    object so test logs can be filtered with ordinary JSON tooling.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.warning(..., extra={"context": {...}})
        if hasattr(record, "context"):
            log_data["context"] = record.context

        # Spans and protobuf values inside context fall back to str()
        return json.dumps(log_data, default=str)


def _file_logging_enabled(value: bool | None) -> bool:
    if value is not None:
        return value
    return os.getenv("LOG_TO_FILE", "true").strip().lower() not in _FALSE_VALUES


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    to_file: bool | None = None,
    stream: IO[str] | None = None,
) -> None:
    """
    Setup structured logging for the collector process.

    The standalone collector logs to the console and to a rotating file.
    Test suites embedding the collector usually pass ``to_file=False`` (or set
    ``LOG_TO_FILE=false``) so that no ``04_logs/`` directory is created.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
                   Defaults to LOG_LEVEL env var or INFO.
        log_file: Path to log file. Defaults to LOG_FILE env var or
                  04_logs/collector.log. Ignored when file logging is off.
        to_file: Write the rotating log file. Defaults to LOG_TO_FILE env
                 var, enabled unless set to a false value.
        stream: Console stream. Defaults to stdout.
    """
    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": stream if stream is not None else "ext://sys.stdout",
        },
    }

    if _file_logging_enabled(to_file):
        if log_file is None:
            log_file = os.getenv("LOG_FILE", str(DEFAULT_LOG_PATH))
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10 MB
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "mock_collector.logging_config.JSONFormatter",
            },
        },
        "handlers": handlers,
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
    }

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    """Logger for a collector module (pass ``__name__``)."""
    return logging.getLogger(name)
