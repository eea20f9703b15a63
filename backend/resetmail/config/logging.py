"""
Structured logging setup.

Every module obtains its logger through ``get_logger(__name__)`` and logs
an event name plus key/value context. ``configure_logging`` is called once
by the application bootstrap (FastAPI lifespan or CLI).
"""

import logging
import sys
from typing import Any, Optional, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    fmt: str = "json",
    stream: Optional[TextIO] = None,
) -> None:
    """Configure stdlib logging and structlog for the process."""
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=log_level,
        force=True,
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if str(fmt).lower() == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers stay uncached so structlog.testing.capture_logs keeps working
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
