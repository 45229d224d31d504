"""
Structured logging for KaoCache.

Helpers that record cache operations together with their context
(operation name, identifier hash, paths) so failures can be diagnosed
from the log alone.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from kaocache.shared.constants import Logging
from kaocache.shared.errors import ErrorContext, KaoCacheError


class StructuredFormatter(logging.Formatter):
    """
    Formatter that renders log records as single-line JSON.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as JSON.

        Args:
            record: Log record

        Returns:
            JSON encoded log line
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("error_code", "context", "operation", "duration_ms", "result_info"):
            if hasattr(record, attr):
                log_entry[attr] = getattr(record, attr)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """
    Create a Rich console with the KaoCache log theme.

    Returns:
        Configured Rich Console instance
    """
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.message": "white",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = Logging.ROOT_LOGGER,
    level: str = Logging.DEFAULT_LEVEL,
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        name: Logger name (default: "kaocache")
        level: Log level name (default: "WARNING")
        log_file: Optional path of a JSON log file
        use_rich_console: Use Rich for console output instead of JSON lines

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicated handlers when called more than once
    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.WARNING)
    logger.setLevel(log_level)

    if use_rich_console:
        console = _create_rich_console()
        handler: logging.Handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format=Logging.CONSOLE_TIME_FORMAT,
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    handler.setLevel(log_level)
    logger.addHandler(handler)

    # File output is always JSON
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def _context_to_dict(context: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    if context is None:
        return {}
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context)


def log_operation_error(
    logger: logging.Logger,
    error: KaoCacheError,
    operation: str | None = None,
    additional_context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Log a KaoCacheError with its structured context.

    Args:
        logger: Logger instance
        error: The error being reported
        operation: Operation name (defaults to the one in the error context)
        additional_context: Extra context merged over the error's own
    """
    context_dict: dict[str, Any] = error.context.safe_dict()
    context_dict.update(_context_to_dict(additional_context))

    logger.error(
        error.message,
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error is not None,
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Log the successful completion of an operation.

    Args:
        logger: Logger instance
        operation: Operation name
        duration_ms: Elapsed time in milliseconds
        result_info: Summary of the result
        context: Context information
    """
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_to_dict(context),
        },
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """
    Log the start of an operation.

    Args:
        logger: Logger instance
        operation: Operation name
        context: Context information
    """
    logger.debug(
        "Starting operation '%s'",
        operation,
        extra={
            "operation": operation,
            "context": _context_to_dict(context),
        },
    )


def log_file_operation(
    logger: logging.Logger,
    operation: str,
    path: str,
) -> None:
    """
    Log a completed file system operation (write, delete, rmdir).

    Failures are reported through log_operation_error by the caller.

    Args:
        logger: Logger instance
        operation: File operation type
        path: Path the operation was applied to
    """
    logger.debug(
        "File operation '%s' completed: %s",
        operation,
        path,
        extra={
            "operation": "file_operation",
            "context": {"operation": operation, "path": path},
        },
    )
