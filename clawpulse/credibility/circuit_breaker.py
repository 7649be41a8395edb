"""Circuit breaker guarding the credibility oracle.

CLOSED → OPEN → HALF_OPEN → CLOSED. While open, ``before_call`` fails
fast with ``CircuitOpenError`` so submissions get a retry note at once
instead of waiting on a failing provider.

Usage:
    breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=60.0)
    breaker.before_call()          # raises CircuitOpenError while open
    try:
        result = await provider()
    except Exception:
        breaker.record_failure()
        raise
    breaker.record_success()
"""

import enum
import logging
import time

logger = logging.getLogger(__name__)


class CircuitState(enum.Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """Raised when calling through an open circuit."""

    def __init__(self, name: str, retry_after: float) -> None:
        super().__init__(f"Circuit {name} is OPEN, retry in {retry_after:.0f}s")
        self.retry_after = retry_after


class CircuitBreaker:
    """Consecutive-failure breaker that admits one trial call when half open.

    Args:
        failure_threshold: Consecutive failures before the circuit opens.
        recovery_timeout: Seconds the circuit stays open before a trial call.
        name: Name used in logs and errors.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        name: str = "oracle",
        clock=time.monotonic,
    ) -> None:
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._name = name
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._trial_in_flight = False

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def consecutive_failures(self) -> int:
        return self._failures

    @property
    def retry_after(self) -> float:
        """Seconds until a trial call is allowed; 0 unless open."""
        if self._state != CircuitState.OPEN:
            return 0.0
        elapsed = self._clock() - self._opened_at
        return max(self._recovery_timeout - elapsed, 0.0)

    def before_call(self) -> None:
        """Admit a call or raise ``CircuitOpenError``.

        An open circuit whose timeout has elapsed moves to HALF_OPEN and
        admits the caller as the trial call. Other callers are refused until
        that call records its outcome.
        """
        if self._state == CircuitState.CLOSED:
            return
        if self._state == CircuitState.HALF_OPEN:
            if self._trial_in_flight:
                raise CircuitOpenError(self._name, 0.0)
            self._trial_in_flight = True
            return
        remaining = self.retry_after
        if remaining > 0:
            raise CircuitOpenError(self._name, remaining)
        self._state = CircuitState.HALF_OPEN
        self._trial_in_flight = True
        logger.info("Circuit %s: OPEN → HALF_OPEN (trial call)", self._name)

    def record_success(self) -> None:
        if self._state == CircuitState.HALF_OPEN:
            logger.info("Circuit %s: HALF_OPEN → CLOSED", self._name)
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._trial_in_flight = False

    def record_failure(self) -> None:
        self._failures += 1
        self._trial_in_flight = False
        if self._state == CircuitState.HALF_OPEN or (
            self._state == CircuitState.CLOSED
            and self._failures >= self._failure_threshold
        ):
            logger.warning(
                "Circuit %s: %s → OPEN after %d failures",
                self._name,
                self._state.name,
                self._failures,
            )
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()
