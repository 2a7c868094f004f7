"""
Circuit breaker for calls to the yoga backend.

After repeated transport failures the breaker stops sending requests
for a cool-down period, so a page refresh against a dead backend fails
fast instead of waiting on every timeout.

States:
- CLOSED: Requests pass through
- OPEN: Requests are rejected until the cool-down elapses
- HALF_OPEN: One trial request decides whether to close again
"""

import logging
import time
from enum import Enum
from typing import Any, Callable, Optional, Type


logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    """Raised when a call is rejected because the circuit is OPEN."""
    pass


class CircuitBreaker:
    """
    Counts consecutive failures of a guarded call and opens after a threshold.

    Only exceptions of expected_exception count as failures; anything
    else propagates without touching the counter.

    Examples:
        >>> breaker = CircuitBreaker(
        ...     failure_threshold=3,
        ...     reset_timeout=60,
        ...     expected_exception=requests.RequestException
        ... )
        >>> try:
        ...     response = breaker.call(session.get, url, timeout=10)
        ... except CircuitBreakerOpenError:
        ...     response = None
    """

    def __init__(
        self,
        failure_threshold: int = 3,
        reset_timeout: float = 60.0,
        expected_exception: Type[Exception] = Exception,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize circuit breaker.

        Args:
            failure_threshold: Consecutive failures before opening
            reset_timeout: Seconds to stay OPEN before a trial call
            expected_exception: Exception type counted as failure
            clock: Monotonic time source in seconds
        """
        if failure_threshold <= 0:
            raise ValueError("failure_threshold must be positive")

        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.expected_exception = expected_exception
        self._clock = clock

        self.failure_count = 0
        self.opened_at: Optional[float] = None
        self.state = CircuitState.CLOSED

        logger.debug(
            f"Circuit breaker initialized: "
            f"threshold={failure_threshold}, reset_timeout={reset_timeout}s"
        )

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """
        Run func under circuit breaker protection.

        Raises:
            CircuitBreakerOpenError: If the circuit is OPEN
            Exception: Whatever func raises
        """
        if self.state == CircuitState.OPEN:
            if self._cooldown_elapsed():
                logger.info("Circuit breaker: trial request (HALF_OPEN)")
                self.state = CircuitState.HALF_OPEN
            else:
                raise CircuitBreakerOpenError(
                    f"Backend circuit is OPEN after {self.failure_count} failures"
                )

        try:
            result = func(*args, **kwargs)
        except self.expected_exception:
            self._on_failure()
            raise

        self._on_success()
        return result

    def _cooldown_elapsed(self) -> bool:
        if self.opened_at is None:
            return True
        return self._clock() - self.opened_at >= self.reset_timeout

    def _on_success(self):
        if self.state == CircuitState.HALF_OPEN:
            logger.info("Circuit breaker: backend recovered (CLOSED)")
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at = None

    def _on_failure(self):
        self.failure_count += 1

        logger.warning(
            f"Circuit breaker: failure #{self.failure_count} "
            f"(threshold={self.failure_threshold})"
        )

        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            if self.state != CircuitState.OPEN:
                logger.error(
                    f"Circuit breaker: OPEN after {self.failure_count} failures"
                )
            self.state = CircuitState.OPEN
            self.opened_at = self._clock()

    def reset(self):
        """Manually close the circuit and clear the failure count."""
        logger.info("Circuit breaker: manual reset")
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at = None

    @property
    def is_open(self) -> bool:
        return self.state == CircuitState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state == CircuitState.CLOSED

    @property
    def is_half_open(self) -> bool:
        return self.state == CircuitState.HALF_OPEN

    def get_state_info(self) -> dict:
        """
        Get current circuit breaker state information.

        Returns:
            Dictionary with state, failure count and threshold
        """
        return {
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "reset_timeout": self.reset_timeout,
        }
