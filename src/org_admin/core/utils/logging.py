"""
Structured logging utilities.

Configures structlog for the CLI and provides a context manager for
structured operation logging with timing and error tracking.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog once for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        json_logs: Render one JSON object per line instead of coloured console output
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        # Resolve stderr per logger so redirected streams are honoured
        logger_factory=lambda *_: structlog.PrintLogger(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@asynccontextmanager
async def log_operation(
    operation: str,
    log: Any = None,
    **context: Any,
) -> Any:  # AsyncGenerator[None, None]
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        log: Logger to use (defaults to this module's logger)
        **context: Additional context to include in logs

    Example:
        async with log_operation("emeritus", log=ctx.logger, org=options.org):
            await run_emeritus(...)
    """
    bound = (log or logger).bind(operation=operation, **context)
    start_time = time.monotonic()

    bound.info("operation_started")

    try:
        yield
    except Exception as e:
        latency_ms = int((time.monotonic() - start_time) * 1000)
        bound.error("operation_failed", error=str(e), latency_ms=latency_ms)
        raise
    else:
        latency_ms = int((time.monotonic() - start_time) * 1000)
        bound.info("operation_completed", latency_ms=latency_ms)
