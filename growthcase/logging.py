"""structlog setup shared by the CLI and the API server."""

from __future__ import annotations

import logging
import sys

import structlog

# Chatty at INFO; only interesting when debugging.
_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "anthropic", "alembic.runtime.migration")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog and route stdlib logging through the same renderer.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        log_format: "console" for people, "json" for log shipping.

    Everything goes to stderr so CLI output on stdout stays parseable.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    renderer = _renderer(log_format)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # uvicorn, sqlalchemy and alembic log through the stdlib
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_SHARED_PROCESSORS,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    quiet_level = logging.WARNING if level > logging.DEBUG else logging.DEBUG
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
