"""Structlog configuration for structured logging.

- JSON output in production for log aggregation
- Colored console output in development
- Correlation ID and request context propagated through contextvars
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

from .. import __version__

SOURCEWISE_ENV = os.getenv("SOURCEWISE_ENV", "development")
IS_PRODUCTION = SOURCEWISE_ENV == "production"


def add_service_info(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add service and environment information to log events."""
    event_dict["service"] = "sourcewise"
    event_dict["version"] = __version__
    event_dict["environment"] = SOURCEWISE_ENV
    return event_dict


def configure_structlog(json_output: bool | None = None) -> None:
    """Configure structlog processors.

    Args:
        json_output: Force JSON (True) or console (False) rendering.
            Defaults to JSON in production only.
    """
    use_json = IS_PRODUCTION if json_output is None else json_output

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_service_info,
    ]

    if use_json:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.INFO if use_json else logging.DEBUG,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound structlog logger (usually for __name__)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs (e.g. correlation_id, rfq_id) to the logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


configure_structlog()
