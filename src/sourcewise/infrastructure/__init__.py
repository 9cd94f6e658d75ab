"""Logging, metrics and collaborator fallback infrastructure."""

from .fallback import CircuitBreaker, CircuitState, CollaboratorGuard
from .logging_config import bind_context, clear_context, configure_structlog, get_logger
from .metrics import (
    analysis_duration_seconds,
    record_collaborator_call,
    record_match_run,
    record_request,
)

__all__ = [
    # Fallback
    "CircuitBreaker",
    "CircuitState",
    "CollaboratorGuard",
    # Logging
    "get_logger",
    "bind_context",
    "clear_context",
    "configure_structlog",
    # Metrics
    "analysis_duration_seconds",
    "record_request",
    "record_match_run",
    "record_collaborator_call",
]
