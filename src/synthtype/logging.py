"""Structured logging for synthtype.

All records go to loggers under the ``synthtype`` namespace. The library
itself only installs a NullHandler; applications opt in to output with
``configure_logging`` (or ``synthtype.configure``). Text and JSON output
formats are supported.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ROOT_LOGGER = "synthtype"


class LogFormat(Enum):
    """Log output format."""

    TEXT = "text"
    JSON = "json"


@dataclass
class LogContext:
    """Context information for structured logging."""

    component: str = ""
    operation: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def with_extra(self, **kwargs: Any) -> "LogContext":
        """Create new context with additional fields."""
        return LogContext(
            component=self.component,
            operation=self.operation,
            extra={**self.extra, **kwargs},
        )


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        ctx = getattr(record, "context", None)
        if isinstance(ctx, LogContext):
            if ctx.component:
                log_data["component"] = ctx.component
            if ctx.operation:
                log_data["operation"] = ctx.operation
            if ctx.extra:
                log_data.update({k: str(v) for k, v in ctx.extra.items()})

        return json.dumps(log_data)


class TextFormatter(logging.Formatter):
    """Formatter that outputs human-readable logs with context."""

    def format(self, record: logging.LogRecord) -> str:
        prefix_parts = []

        ctx = getattr(record, "context", None)
        if isinstance(ctx, LogContext):
            if ctx.component:
                prefix_parts.append(f"[{ctx.component}]")
            if ctx.operation:
                prefix_parts.append(f"({ctx.operation})")

        prefix = " ".join(prefix_parts)
        if prefix:
            prefix = f"{prefix} "

        base = super().format(record)

        extra_str = ""
        if isinstance(ctx, LogContext) and ctx.extra:
            extra_str = " " + " ".join(f"{k}={v}" for k, v in ctx.extra.items())

        return f"{prefix}{base}{extra_str}"


class SynthLogger:
    """Structured logger for synthtype components."""

    def __init__(self, name: str):
        """Initialize the logger.

        Args:
            name: Component name; the stdlib logger is ``synthtype.<name>``
        """
        self._logger = logging.getLogger(f"{ROOT_LOGGER}.{name}")
        self._context = LogContext(component=name)

    @property
    def name(self) -> str:
        return self._logger.name

    def with_context(self, **kwargs: Any) -> "SynthLogger":
        """Create a new logger with additional context fields."""
        new_logger = SynthLogger.__new__(SynthLogger)
        new_logger._logger = self._logger
        new_logger._context = self._context.with_extra(**kwargs)
        return new_logger

    def with_operation(self, operation: str) -> "SynthLogger":
        """Create a new logger for a specific operation."""
        new_logger = SynthLogger.__new__(SynthLogger)
        new_logger._logger = self._logger
        new_logger._context = LogContext(
            component=self._context.component,
            operation=operation,
            extra=self._context.extra,
        )
        return new_logger

    def _log(self, level: int, msg: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "(unknown file)",
            0,
            msg,
            (),
            None,
        )
        record.context = self._context.with_extra(**kwargs) if kwargs else self._context
        self._logger.handle(record)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    @contextmanager
    def timed(self, operation: str, **kwargs: Any):
        """Context manager that logs the elapsed time of an operation at DEBUG.

        Yields:
            Dict where 'elapsed_ms' will be set after completion
        """
        start = time.perf_counter()
        result: dict[str, Any] = {}
        try:
            yield result
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            result["elapsed_ms"] = elapsed_ms
            self.debug(
                f"{operation} completed",
                operation=operation,
                elapsed_ms=f"{elapsed_ms:.2f}",
                **kwargs,
            )


_loggers: dict[str, SynthLogger] = {}


def get_logger(name: str) -> SynthLogger:
    """Get or create a logger for a component."""
    if name not in _loggers:
        _loggers[name] = SynthLogger(name)
    return _loggers[name]


def parse_level(level: int | str) -> int:
    """Accept a logging level as an int or a name such as "DEBUG"."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(
    level: int | str = logging.WARNING,
    log_format: LogFormat = LogFormat.TEXT,
    stream: Any = None,
) -> logging.Handler:
    """Configure output for every synthtype logger.

    Args:
        level: Logging level (int or level name)
        log_format: Output format
        stream: Destination stream (default: stderr)

    Returns:
        The installed handler
    """
    level = parse_level(level)
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    if log_format == LogFormat.JSON:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter("%(asctime)s %(levelname)s %(message)s"))

    root.addHandler(handler)
    return handler


logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())
