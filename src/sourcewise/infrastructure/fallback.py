"""Collaborator call protection: timeouts, circuit breakers and fallbacks.

A failed, slow or short-circuited collaborator call never fails the
analysis. The caller gets the documented fallback value together with a
FallbackNotice so diagnostics can tell it apart from a computed value.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from enum import Enum
from typing import TypeVar

from ..core.errors import CollaboratorUnavailable
from ..models import FallbackNotice
from .logging_config import get_logger
from .metrics import record_collaborator_call

logger = get_logger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing recovery


class CircuitBreaker:
    """Circuit breaker implementation."""

    def __init__(self, failure_threshold: int = 5, timeout_seconds: int = 60):
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.failure_count = 0
        self.last_failure_time: datetime | None = None
        self.state = CircuitState.CLOSED

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = datetime.now()

        if self.failure_count >= self.failure_threshold:
            self.state = CircuitState.OPEN

    def record_success(self) -> None:
        self.failure_count = 0
        self.state = CircuitState.CLOSED

    def can_execute(self) -> bool:
        """Check whether a call may go through."""
        if self.state == CircuitState.CLOSED:
            return True

        if self.state == CircuitState.OPEN:
            if self.last_failure_time:
                elapsed = datetime.now() - self.last_failure_time
                if elapsed > timedelta(seconds=self.timeout_seconds):
                    self.state = CircuitState.HALF_OPEN
                    return True
            return False

        # HALF_OPEN - allow one test request
        return True


class CollaboratorGuard:
    """Runs collaborator calls under a timeout and a per-collaborator breaker."""

    def __init__(
        self,
        timeout_seconds: float = 5.0,
        failure_threshold: int = 5,
        breaker_timeout_seconds: int = 60,
    ):
        self.timeout_seconds = timeout_seconds
        self.failure_threshold = failure_threshold
        self.breaker_timeout_seconds = breaker_timeout_seconds
        self._circuit_breakers: dict[str, CircuitBreaker] = {}

    def get_circuit_breaker(self, collaborator: str) -> CircuitBreaker:
        """Get or create the circuit breaker for a collaborator."""
        if collaborator not in self._circuit_breakers:
            self._circuit_breakers[collaborator] = CircuitBreaker(
                failure_threshold=self.failure_threshold,
                timeout_seconds=self.breaker_timeout_seconds,
            )
        return self._circuit_breakers[collaborator]

    def circuit_breakers(self) -> dict[str, CircuitBreaker]:
        """Breakers created so far, keyed by collaborator call."""
        return dict(self._circuit_breakers)

    async def call(
        self,
        collaborator: str,
        subject: str,
        call: Callable[[], Awaitable[T]],
        fallback: T,
        substituted: str,
    ) -> tuple[T, FallbackNotice | None]:
        """Run one collaborator call.

        Args:
            collaborator: Call name, e.g. ``market_data.price_band``.
            subject: What the call is about (product name, supplier id).
            call: Zero-argument coroutine factory.
            fallback: Value returned when the call cannot be completed.
            substituted: Human-readable description of the fallback value.

        Returns:
            (value, notice); notice is None when the value was computed.
        """
        breaker = self.get_circuit_breaker(collaborator)
        if not breaker.can_execute():
            record_collaborator_call(collaborator, "circuit_open")
            return fallback, self._notice(collaborator, subject, "circuit open", substituted)

        try:
            value = await asyncio.wait_for(call(), timeout=self.timeout_seconds)
        except TimeoutError:
            reason = f"timed out after {self.timeout_seconds:g}s"
        except CollaboratorUnavailable as e:
            reason = e.reason
        except Exception as e:
            logger.error(
                "collaborator_error",
                collaborator=collaborator,
                subject=subject,
                error=str(e),
                exc_info=True,
            )
            reason = f"{type(e).__name__}: {e}"
        else:
            breaker.record_success()
            record_collaborator_call(collaborator, "success")
            return value, None

        breaker.record_failure()
        record_collaborator_call(collaborator, "fallback")
        return fallback, self._notice(collaborator, subject, reason, substituted)

    def _notice(
        self, collaborator: str, subject: str, reason: str, substituted: str
    ) -> FallbackNotice:
        logger.warning(
            "collaborator_fallback",
            collaborator=collaborator,
            subject=subject,
            reason=reason,
            substituted=substituted,
        )
        return FallbackNotice(
            source=collaborator, subject=subject, reason=reason, substituted=substituted
        )
