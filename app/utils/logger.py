"""
Structured logging for MedLens.

structlog renders JSON in production and coloured console output in debug
mode. Each request binds a request id and path into context variables so
that every event logged while serving it carries them.
"""

import logging
import sys
from typing import Iterable, Optional

import structlog
from structlog.types import Processor

from app.config import settings

# Loggers of client libraries that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "urllib3")


def configure_logging(
    log_level: Optional[str] = None,
    json_format: bool = True,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Override log level (defaults to settings.log_level)
        json_format: Whether to output JSON (True) or console format (False)
        quiet_loggers: Standard library loggers capped at WARNING
    """
    level = log_level or settings.log_level
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: list[Processor] = (
        [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        if json_format
        else [structlog.dev.ConsoleRenderer(colors=True)]
    )

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Attach request identifiers to every event logged for this request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str = "medlens") -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name for identification

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


configure_logging(
    log_level=settings.log_level,
    json_format=not settings.debug
)
