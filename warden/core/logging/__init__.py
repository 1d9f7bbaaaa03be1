"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging with JSON output for deployed environments
and human-readable console output for development.

The logging configuration includes:
- ISO timestamps
- Log level inclusion
- JSON or console rendering based on settings
- Standard library integration so third-party loggers share the level
"""

import logging
from typing import Optional

import structlog

from warden.core.config.settings import settings


def configure_logging(log_level: str = "INFO", json_logs: Optional[bool] = None) -> None:
    """
    Configures the application's logging system.

    Args:
        log_level: Minimum level for the standard library root logger.
        json_logs: Render events as JSON. Defaults to ``settings.LOG_JSON``.
    """
    if json_logs is None:
        json_logs = settings.LOG_JSON

    logging.basicConfig(format="%(message)s", level=log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_email(email: Optional[str]) -> str:
    """Mask an email address for log output, keeping the first character and the domain."""
    if not email or "@" not in email:
        return "***"
    local, domain = email.rsplit("@", 1)
    return f"{local[:1]}***@{domain}"


# Application-wide logger for modules that do not bind their own name.
logger = structlog.get_logger()
