"""Structured logging setup."""

import logging
import sys

import structlog

from enrollment_gateway.core.config import settings


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    Configure stdlib logging and structlog.

    Context bound with ``structlog.contextvars`` (request id, user id)
    is merged into every event.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    renderer = (
        structlog.processors.JSONRenderer()
        if (fmt or settings.log_format) == "json"
        else structlog.dev.ConsoleRenderer()
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
