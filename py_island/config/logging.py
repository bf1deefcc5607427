"""Logging setup."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", fmt: str = "console"):
    """
    Route structlog through the standard library logger.

    Args:
        level: Log level name
        fmt: "json" for machine-readable lines, anything else for console output
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper())

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
