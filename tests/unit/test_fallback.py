"""Unit tests for the collaborator guard and circuit breaker."""

import asyncio
from datetime import datetime, timedelta

import pytest

from sourcewise.core.errors import CollaboratorUnavailable
from sourcewise.infrastructure.fallback import (
    CircuitBreaker,
    CircuitState,
    CollaboratorGuard,
)


class TestCircuitBreaker:
    """Tests for CircuitBreaker."""

    def test_initial_state_is_closed(self):
        cb = CircuitBreaker()
        assert cb.state == CircuitState.CLOSED
        assert cb.can_execute()

    def test_failures_below_threshold(self):
        cb = CircuitBreaker(failure_threshold=5)
        for _ in range(4):
            cb.record_failure()
        assert cb.state == CircuitState.CLOSED
        assert cb.can_execute()

    def test_failures_at_threshold_opens_circuit(self):
        cb = CircuitBreaker(failure_threshold=3)
        for _ in range(3):
            cb.record_failure()
        assert cb.state == CircuitState.OPEN
        assert not cb.can_execute()

    def test_success_resets_counter(self):
        cb = CircuitBreaker(failure_threshold=5)
        cb.record_failure()
        cb.record_failure()
        cb.record_success()
        assert cb.failure_count == 0
        assert cb.state == CircuitState.CLOSED

    def test_timeout_moves_to_half_open(self):
        cb = CircuitBreaker(failure_threshold=2, timeout_seconds=1)
        cb.record_failure()
        cb.record_failure()
        assert cb.state == CircuitState.OPEN

        # Simulate timeout
        cb.last_failure_time = datetime.now() - timedelta(seconds=2)
        assert cb.can_execute()
        assert cb.state == CircuitState.HALF_OPEN


class TestCollaboratorGuard:
    """Tests for CollaboratorGuard.call."""

    @pytest.mark.asyncio
    async def test_success_returns_value_without_notice(self):
        guard = CollaboratorGuard()

        async def fetch():
            return 42

        value, notice = await guard.call("market_data.price_band", "steel", fetch, 0, "zero")
        assert value == 42
        assert notice is None

    @pytest.mark.asyncio
    async def test_unavailable_collaborator_falls_back(self):
        guard = CollaboratorGuard()

        async def fetch():
            raise CollaboratorUnavailable("market_data", "HTTP 502")

        value, notice = await guard.call("market_data.price_band", "steel", fetch, None, "none")
        assert value is None
        assert notice.fallback is True
        assert notice.source == "market_data.price_band"
        assert notice.subject == "steel"
        assert notice.reason == "HTTP 502"

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self):
        guard = CollaboratorGuard(timeout_seconds=0.01)

        async def fetch():
            await asyncio.sleep(1)
            return "late"

        value, notice = await guard.call("supplier_directory.history", "SUP-1", fetch, None, "-")
        assert value is None
        assert "timed out" in notice.reason

    @pytest.mark.asyncio
    async def test_unexpected_errors_fall_back(self):
        guard = CollaboratorGuard()

        async def fetch():
            raise ConnectionError("connection reset by peer")

        value, notice = await guard.call("market_data.price_band", "steel", fetch, None, "none")
        assert value is None
        assert notice.fallback is True
        assert notice.reason == "ConnectionError: connection reset by peer"
        assert guard.get_circuit_breaker("market_data.price_band").failure_count == 1

    @pytest.mark.asyncio
    async def test_open_circuit_skips_call(self):
        guard = CollaboratorGuard(failure_threshold=2)
        calls = []

        async def fetch():
            calls.append(1)
            raise CollaboratorUnavailable("market_data", "down")

        for _ in range(3):
            value, notice = await guard.call("market_data.demand", "steel", fetch, "f", "f")

        assert len(calls) == 2
        assert value == "f"
        assert notice.reason == "circuit open"
        assert guard.get_circuit_breaker("market_data.demand").state == CircuitState.OPEN

    @pytest.mark.asyncio
    async def test_breakers_are_per_collaborator(self):
        guard = CollaboratorGuard(failure_threshold=1)

        async def failing():
            raise CollaboratorUnavailable("market_data", "down")

        async def working():
            return "ok"

        await guard.call("market_data.demand", "steel", failing, None, "-")
        value, notice = await guard.call("market_data.price_band", "steel", working, None, "-")
        assert value == "ok"
        assert notice is None
        assert set(guard.circuit_breakers()) == {"market_data.demand", "market_data.price_band"}
