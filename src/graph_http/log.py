"""Structured logging for graph-http internals.

Loggers wrap standard library loggers under the ``graph_http`` namespace, so
an application that never configures logging sees nothing; one that does
receives the events through its own handlers. ``setup_logging`` is a
convenience for scripts and tests that want readable or JSON output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Mapping

import structlog


logging.getLogger("graph_http").addHandler(logging.NullHandler())

REDACTED_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-ms-client-secret"})


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy ``headers`` for logging with credential values masked."""
    return {key: "[REDACTED]" if key.lower() in REDACTED_HEADERS else value for key, value in headers.items()}


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog on top of the standard library root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, render JSON lines instead of the console format
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger over ``logging.getLogger(name)``.

    Level filtering and output are left to the standard library handlers;
    processors come from the current structlog configuration.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
        **initial_context,
    )
