"""Structured logging setup for Statforge.

The engine only emits events through ``structlog.get_logger``; it never
configures output. A host application embedding Statforge calls
``configure_logging()`` once at startup to apply ``log_level`` and
``log_format`` from its settings.
"""

import logging

import structlog

from statforge.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog from settings.

    Uses a colored console renderer by default, or one JSON object per line
    when ``log_format`` is ``json``. Events below ``log_level`` are dropped.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.log_format.lower() == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
