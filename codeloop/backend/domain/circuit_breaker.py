"""CircuitBreaker — tracks primary-model health through closed, open and half-open."""

import time
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, Field


class CircuitStatus(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerState(BaseModel, frozen=True):
    status: CircuitStatus = CircuitStatus.CLOSED
    consecutive_failures: int = Field(default=0, ge=0)
    opened_at: float | None = None
    recovery_deadline: float | None = None


class CircuitBreaker:
    """State machine guarding the primary model.

    closed:    primary is used; failure_threshold consecutive rate limits open
               the circuit.
    open:      primary is skipped until recovery_deadline has passed, after
               which the next status check moves to half_open.
    half_open: the next primary request is a probe; success closes the
               circuit, any failure re-opens it with a fresh deadline.

    Every transition replaces the frozen state object, so callers can keep a
    reference to an earlier state for comparison.
    """

    def __init__(
        self,
        failure_threshold: int,
        recovery_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        self._failure_threshold = failure_threshold
        self._recovery_seconds = recovery_seconds
        self._clock = clock
        self._state = CircuitBreakerState()

    @property
    def state(self) -> CircuitBreakerState:
        return self._state

    def current_status(self) -> CircuitStatus:
        """Return the status, promoting open to half_open once the deadline passes."""
        state = self._state
        if (
            state.status is CircuitStatus.OPEN
            and state.recovery_deadline is not None
            and self._clock() >= state.recovery_deadline
        ):
            self._state = state.model_copy(update={"status": CircuitStatus.HALF_OPEN})
        return self._state.status

    def record_success(self) -> CircuitBreakerState:
        """Record a successful primary request."""
        if self.current_status() is not CircuitStatus.OPEN:
            self._state = CircuitBreakerState()
        return self._state

    def record_rate_limit(self) -> CircuitBreakerState:
        """Record a rate-limit signal from the primary model."""
        status = self.current_status()
        failures = self._state.consecutive_failures + 1
        if status is CircuitStatus.HALF_OPEN or (
            status is CircuitStatus.CLOSED and failures >= self._failure_threshold
        ):
            self._open(failures)
        else:
            self._state = self._state.model_copy(
                update={"consecutive_failures": failures}
            )
        return self._state

    def record_failure(self) -> CircuitBreakerState:
        """Record a primary failure that is not a rate limit.

        Only a failed half-open probe changes the state.
        """
        if self.current_status() is CircuitStatus.HALF_OPEN:
            self._open(self._state.consecutive_failures + 1)
        return self._state

    def _open(self, failures: int) -> None:
        now = self._clock()
        self._state = CircuitBreakerState(
            status=CircuitStatus.OPEN,
            consecutive_failures=failures,
            opened_at=now,
            recovery_deadline=now + self._recovery_seconds,
        )
