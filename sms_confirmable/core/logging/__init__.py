"""
Logging configuration module for structured logging.

This module configures the logging system using structlog. It provides
structured logging with JSON formatting for production and human-readable
console output for development.
"""

import logging

import structlog

from sms_confirmable.core.config.settings import settings


def configure_logging(log_level: str = settings.LOG_LEVEL, json_logs: bool = settings.LOG_JSON):
    """
    Configures the logging system.

    This function sets up structlog with:
    1. ISO format timestamps
    2. Log level inclusion and filtering
    3. JSON formatting for production, console formatting for development
    4. Standard library logger factory and bound logger
    5. Logger caching for performance
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper(), logging.INFO))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
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


# Create a singleton logger instance for the package
logger = structlog.get_logger()
