"""Structured logging configuration for horzcat.

Uses structlog for the CLI's own diagnostics.  Both structlog and stdlib
logging are routed through :class:`structlog.stdlib.ProcessorFormatter`,
so library modules that use ``logging.getLogger(__name__)`` render in
the same format as loggers obtained from :func:`get_logger`.

Log records go to **stderr**: stdout carries the fused data.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Drop the bookkeeping keys ProcessorFormatter adds to every record."""
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "WARNING",
) -> None:
    """Configure structlog and stdlib logging for horzcat.

    Args:
        json_output: If True, output JSON. If False, human-readable.
        level: Log level (DEBUG, INFO, WARNING, ERROR).
    """
    log_level = getattr(logging, level.upper())

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        final_processors: list[Any] = [
            _remove_internal_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [
            _remove_internal_fields,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration in tests needs fresh loggers.
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound structlog logger.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
