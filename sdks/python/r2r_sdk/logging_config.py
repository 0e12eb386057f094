"""Structured logging setup for the R2R SDK."""

import logging
import os

import structlog


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure structlog and the stdlib root logger.

    The SDK never calls this on import; applications opt in.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=log_level, format="%(message)s")


def configure_from_env() -> None:
    """Configure logging from R2R_LOG_LEVEL and R2R_LOG_FORMAT."""
    configure_logging(
        level=os.getenv("R2R_LOG_LEVEL", "INFO"),
        fmt=os.getenv("R2R_LOG_FORMAT", "console"),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
