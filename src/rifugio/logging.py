"""Structured logging for the checker, using structlog.

stdout carries only the availability report, so every log line goes to
stderr. Each run binds its query (URL, day range, minimum beds) into
contextvars, so per-cell events don't have to repeat it.
"""

import logging
import sys
from typing import Any, TextIO

import structlog


def setup_logging(
    json_output: bool = False,
    log_level: str = "WARNING",
    *,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_output: One JSON object per line instead of console format.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        stream: Where log lines go (default: stderr).
    """
    stream = stream or sys.stderr
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    # Playwright and asyncio log through stdlib logging
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)


def bind_check_context(**fields: Any) -> None:
    """Replace the per-run context merged into every log event."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance bound with the module name.

    Args:
        name: Logger name (typically __name__ from calling module).
    """
    return structlog.get_logger(name)
