"""
Logging utilities for safe structured logging.

Provides helpers for safe logging without string concatenation errors and
a stage timer that emits start/success/error events with a duration.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Safely convert any value to a string for logging.

    Handles lists, dicts, None, and other types safely.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context dict with arbitrary key-value pairs
    """
    safe_context = {
        key: val if isinstance(val, (int, float, bool)) else safe_log_value(val)
        for key, val in context.items()
    }
    logger.log(level, message, extra=safe_context)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with full context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context dict
    """
    safe_context = {
        key: safe_log_value(val) for key, val in context.items()
    }
    safe_context.update({
        "error_type": type(exc).__name__,
        "error_msg": str(exc),
    })
    logger.error(message, exc_info=exc, extra=safe_context)


@contextmanager
def log_stage(logger: logging.Logger, event: str, **context) -> Iterator[dict[str, Any]]:
    """
    Time a pipeline stage and log its lifecycle.

    Emits ``<event>.start`` on entry, ``<event>.success`` with ``duration_ms``
    on normal exit and ``<event>.error`` on exception (which is re-raised).
    The yielded dict is merged into the success event so callers can attach
    result fields such as output lengths.

    Args:
        logger: Logger instance
        event: Dotted event prefix, e.g. "generate.prd"
        **context: Fields attached to every event
    """
    result: dict[str, Any] = {}
    started = time.perf_counter()
    log_with_context(logger, logging.INFO, f"{event}.start", event=f"{event}.start", **context)
    try:
        yield result
    except Exception as exc:
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        log_with_context(
            logger,
            logging.WARNING,
            f"{event}.error",
            event=f"{event}.error",
            duration_ms=duration_ms,
            error_type=type(exc).__name__,
            error_msg=str(exc),
            **context,
        )
        raise
    fields = {**context, **result}
    fields["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
    log_with_context(logger, logging.INFO, f"{event}.success", event=f"{event}.success", **fields)
