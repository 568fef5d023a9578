"""Structured logging with structlog.

Services log events such as ``roulette_roll`` and ``expedition_started``
with keyword context; the request id bound by RequestIdMiddleware is merged
in. ``POKEROLL_LOG_FORMAT=json`` for deployments, ``console`` for local runs.
"""

import logging

import structlog

from pokeroll.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    # SQL echo goes through the stdlib logger; keep it quiet unless asked for.
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    # aiosqlite logs every cursor call at DEBUG.
    logging.getLogger("aiosqlite").setLevel(logging.INFO)
