"""Structured logging infrastructure for student_growth.

Every record is written as one JSON object with the common fields ``ts``,
``level``, ``logger`` and ``message`` plus whatever keyword fields the caller
passed. Remote data locations should go through :func:`redact_url` before
they are logged.
"""

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any, TextIO
from urllib.parse import urlsplit, urlunsplit

__all__ = ["StructuredLogger", "configure_logging", "get_logger", "redact_url"]

_HANDLER_NAME = "student_growth.structured"

_RESERVED_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs JSON-structured log entries."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_entry: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update({key: value for key, value in record.__dict__.items() if key not in _RESERVED_FIELDS})

        if record.exc_info:
            log_entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class StructuredLogger:
    """Wrapper around standard logger with structured logging support."""

    def __init__(self, logger: logging.Logger) -> None:
        """Initialize structured logger.

        Args:
            logger: The underlying Python logger instance.
        """
        self._logger = logger

    @property
    def name(self) -> str:
        """Name of the underlying logger."""
        return self._logger.name

    def _log(self, level: int, msg: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.log(level, msg, exc_info=exc_info, extra=dict(kwargs))

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, msg, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log error message with the active exception's traceback."""
        self._log(logging.ERROR, msg, exc_info=True, **kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log critical message."""
        self._log(logging.CRITICAL, msg, **kwargs)


def _level_from_env() -> int:
    log_level = os.getenv("STUDENT_GROWTH_LOG_LEVEL", "INFO").upper()
    return getattr(logging, log_level, logging.INFO)


def _structured_handler(stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(StructuredFormatter())
    return handler


def _has_structured_handler(logger: logging.Logger) -> bool:
    return any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance.

    Loggers inside the ``student_growth`` package share the handler that
    :func:`configure_logging` installs on the package root. Any other logger
    gets its own stdout handler the first time it is requested.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        Configured StructuredLogger instance.
    """
    logger = logging.getLogger(name)

    if name != "student_growth" and name.startswith("student_growth."):
        root = logging.getLogger("student_growth")
        if not _has_structured_handler(root):
            configure_logging()
        return StructuredLogger(logger)

    # Only configure if not already configured
    if not _has_structured_handler(logger):
        logger.addHandler(_structured_handler(sys.stdout))
        logger.propagate = False
        logger.setLevel(_level_from_env())

    return StructuredLogger(logger)


def configure_logging(level: int | None = None, stream: TextIO | None = None) -> None:
    """(Re)configure the package root logger.

    Args:
        level: Log level; defaults to ``STUDENT_GROWTH_LOG_LEVEL`` or INFO.
        stream: Output stream; defaults to stdout. The CLI passes stderr.
    """
    root = logging.getLogger("student_growth")
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    root.addHandler(_structured_handler(stream or sys.stdout))
    root.propagate = False
    root.setLevel(level if level is not None else _level_from_env())


def redact_url(location: str) -> str:
    """Strip credentials and query strings from a URL before logging it.

    Local paths are returned unchanged.

    Args:
        location: File path or URL.

    Returns:
        Location that is safe to log.
    """
    parts = urlsplit(location)
    if parts.scheme not in {"http", "https"}:
        return location

    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, host, parts.path, "", ""))
