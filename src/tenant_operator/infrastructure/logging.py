"""Structlog configuration for the operator.

Configures structlog with colored console output for development
and JSON output when running inside a cluster.
"""

import logging
import os
import sys

import structlog

from infrastructure.settings import get_settings


def configure_logging(controller: str | None = None) -> None:
    """Configure structlog with appropriate processors.

    Uses colored console output when FORCE_COLOR is set or stdout is a TTY,
    otherwise renders one JSON object per line. Debug events are dropped
    unless the application runs with ``debug`` enabled.

    Args:
        controller: Optional controller name bound to every event through
            structlog's context variables.
    """
    # FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    use_colors = force_color or sys.stdout.isatty()
    min_level = logging.DEBUG if get_settings().debug else logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_colors:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    if controller is not None:
        structlog.contextvars.bind_contextvars(controller=controller)
