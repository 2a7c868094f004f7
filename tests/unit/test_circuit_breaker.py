"""
Unit tests for the backend circuit breaker.
"""

import pytest

from yoga_booking.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerOpenError,
    CircuitState,
)


class BackendDown(Exception):
    """Transport failure used in tests."""
    pass


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def failing():
    raise BackendDown("connection refused")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker(
        failure_threshold=2,
        reset_timeout=60,
        expected_exception=BackendDown,
        clock=clock
    )


def trip(breaker):
    for _ in range(breaker.failure_threshold):
        with pytest.raises(BackendDown):
            breaker.call(failing)


class TestCircuitBreaker:
    """Test cases for CircuitBreaker."""

    def test_initial_state_closed(self, breaker):
        """Test circuit breaker starts in CLOSED state."""
        assert breaker.state == CircuitState.CLOSED
        assert breaker.is_closed
        assert not breaker.is_open
        assert breaker.failure_count == 0

    def test_successful_call_passes_through(self, breaker):
        """Test successful call returns the function result."""
        assert breaker.call(lambda x: x * 2, 21) == 42
        assert breaker.failure_count == 0

    def test_failure_below_threshold_stays_closed(self, breaker):
        """Test a single failure only counts."""
        with pytest.raises(BackendDown):
            breaker.call(failing)

        assert breaker.failure_count == 1
        assert breaker.is_closed

    def test_success_resets_failure_count(self, breaker):
        """Test failures must be consecutive to open."""
        with pytest.raises(BackendDown):
            breaker.call(failing)
        breaker.call(lambda: None)

        assert breaker.failure_count == 0

    def test_opens_at_threshold(self, breaker):
        """Test circuit opens after threshold failures."""
        trip(breaker)

        assert breaker.is_open
        assert breaker.failure_count == 2

    def test_open_circuit_rejects_calls(self, breaker):
        """Test OPEN circuit does not invoke the function."""
        trip(breaker)
        calls = []

        with pytest.raises(CircuitBreakerOpenError):
            breaker.call(lambda: calls.append(1))

        assert calls == []

    def test_half_open_after_cooldown_and_recovers(self, breaker, clock):
        """Test trial call after cool-down closes the circuit on success."""
        trip(breaker)
        clock.advance(60)

        assert breaker.call(lambda: "ok") == "ok"
        assert breaker.is_closed
        assert breaker.failure_count == 0

    def test_still_open_before_cooldown(self, breaker, clock):
        """Test calls are rejected until the cool-down elapses."""
        trip(breaker)
        clock.advance(59)

        with pytest.raises(CircuitBreakerOpenError):
            breaker.call(lambda: "ok")

    def test_failed_trial_reopens(self, breaker, clock):
        """Test failure in HALF_OPEN reopens immediately."""
        trip(breaker)
        clock.advance(61)

        with pytest.raises(BackendDown):
            breaker.call(failing)

        assert breaker.is_open

        clock.advance(30)
        with pytest.raises(CircuitBreakerOpenError):
            breaker.call(lambda: "ok")

    def test_unexpected_exception_not_counted(self, breaker):
        """Test other exception types propagate without counting."""
        def broken():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            breaker.call(broken)

        assert breaker.failure_count == 0

    def test_reset(self, breaker):
        """Test manual reset closes the circuit."""
        trip(breaker)
        breaker.reset()

        assert breaker.is_closed
        assert breaker.failure_count == 0

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            CircuitBreaker(failure_threshold=0)

    def test_get_state_info(self, breaker):
        """Test getting state information."""
        info = breaker.get_state_info()

        assert info["state"] == "closed"
        assert info["failure_count"] == 0
        assert info["failure_threshold"] == 2
        assert info["reset_timeout"] == 60
