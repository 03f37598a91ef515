"""Structured logging for the marketplace.

Log records are emitted through structlog on top of the standard library.
Request-scoped values (the calling principal) are bound with ``add_context``
and appear on every event logged while handling that request.
"""

import logging
import os
import sys
from typing import Any

import structlog

# Environment name -> default level when LOG_LEVEL is unset
_DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Third-party loggers that only matter when something goes wrong
_QUIET_LOGGERS = ("protean", "asyncio", "uvicorn.access")


def _environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def log_level_for(environment: str) -> str:
    return os.getenv("LOG_LEVEL", _DEFAULT_LEVELS.get(environment, "INFO"))


def _route_stdlib(level: str) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _processors(environment: str) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if environment in ("production", "staging")
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging() -> None:
    """Route stdlib logging to stdout and configure structlog on top of it."""
    environment = _environment()
    _route_stdlib(log_level_for(environment))

    structlog.configure(
        processors=_processors(environment),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**values: Any) -> None:
    """Bind values to every event logged for the rest of the request."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
