"""
Circuit breaker for provider calls.

A breaker counts consecutive failures of the operations it wraps. At the
failure threshold it opens and rejects calls without running them until the
recovery timeout has elapsed since the last failure; the next call then runs
as a trial in HALF_OPEN and either closes the circuit or re-opens it.

Breakers are handed out per key by CircuitBreakerRegistry, so a failing
provider does not lock out unrelated ones.
"""

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from specforge.domain.exceptions import CircuitOpenError
from specforge.domain.models import CircuitState

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FAILURE_THRESHOLD = 5
DEFAULT_RECOVERY_TIMEOUT = 60.0  # seconds


class CircuitBreaker:
    """
    Failure-counting gate around a callable.

    Usage:
        breaker = CircuitBreaker("OpenAIProvider", failure_threshold=3)
        text = breaker.execute(lambda: call_provider())
    """

    def __init__(
        self,
        name: str = "default",
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        recovery_timeout: float = DEFAULT_RECOVERY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            name: Identifier used in logs and CircuitOpenError
            failure_threshold: Consecutive failures before the circuit opens
            recovery_timeout: Seconds after the last failure before a trial call is allowed
            clock: Monotonic time source (injectable for tests)
        """
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be at least 1")
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self._failures = 0
        self._last_failure_time: float | None = None
        self._state = CircuitState.CLOSED

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failures(self) -> int:
        return self._failures

    @property
    def last_failure_time(self) -> float | None:
        return self._last_failure_time

    def execute(self, operation: Callable[[], T]) -> T:
        """
        Run operation through the breaker.

        Returns:
            The operation's result

        Raises:
            CircuitOpenError: If the circuit is open (operation not invoked)
            Exception: Whatever the operation raised, unchanged
        """
        if self._state == CircuitState.OPEN:
            elapsed = self._clock() - (self._last_failure_time or 0.0)
            if elapsed < self.recovery_timeout:
                raise CircuitOpenError(self.name, self.recovery_timeout - elapsed)
            logger.info(
                "Circuit %s: transitioning to HALF_OPEN after %.1fs",
                self.name,
                elapsed,
            )
            self._state = CircuitState.HALF_OPEN

        try:
            result = operation()
        except Exception:
            self._record_failure()
            raise

        self._record_success()
        return result

    def reset(self) -> None:
        """Force the breaker back to CLOSED with no recorded failures."""
        self._failures = 0
        self._last_failure_time = None
        self._state = CircuitState.CLOSED

    def _record_success(self) -> None:
        if self._state == CircuitState.HALF_OPEN:
            logger.info("Circuit %s: closing after successful trial call", self.name)
        self._failures = 0
        self._state = CircuitState.CLOSED

    def _record_failure(self) -> None:
        self._failures += 1
        self._last_failure_time = self._clock()
        if (
            self._state == CircuitState.HALF_OPEN
            or self._failures >= self.failure_threshold
        ):
            if self._state != CircuitState.OPEN:
                logger.warning(
                    "Circuit %s: OPEN after %d consecutive failures",
                    self.name,
                    self._failures,
                )
            self._state = CircuitState.OPEN


class CircuitBreakerRegistry:
    """
    Lazily creates one CircuitBreaker per key.

    All breakers share the registry's threshold, timeout and clock.
    """

    def __init__(
        self,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        recovery_timeout: float = DEFAULT_RECOVERY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._clock = clock
        self._breakers: dict[str, CircuitBreaker] = {}

    def get(self, key: str) -> CircuitBreaker:
        if key not in self._breakers:
            self._breakers[key] = CircuitBreaker(
                name=key,
                failure_threshold=self._failure_threshold,
                recovery_timeout=self._recovery_timeout,
                clock=self._clock,
            )
        return self._breakers[key]

    def states(self) -> dict[str, CircuitState]:
        return {key: breaker.state for key, breaker in self._breakers.items()}

    def reset(self) -> None:
        self._breakers.clear()
