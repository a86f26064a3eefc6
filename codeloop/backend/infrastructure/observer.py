"""Structlog implementation of the ResilienceObserver port."""

import structlog


class StructlogResilienceObserver:
    """Delegates resilience events to structlog.

    Satisfies the ResilienceObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def backend_request_started(self, model: str, is_fallback: bool) -> None:
        self._log.debug(
            "resilience.request_started", model=model, is_fallback=is_fallback
        )

    def backend_request_failed(
        self, model: str, rate_limited: bool, reason: str
    ) -> None:
        self._log.warning(
            "resilience.request_failed",
            model=model,
            rate_limited=rate_limited,
            reason=reason,
        )

    def circuit_state_changed(
        self, previous: str, current: str, consecutive_failures: int
    ) -> None:
        self._log.warning(
            "resilience.circuit_state_changed",
            previous=previous,
            current=current,
            consecutive_failures=consecutive_failures,
        )

    def fallback_engaged(self, primary_model: str, fallback_model: str) -> None:
        self._log.info(
            "resilience.fallback_engaged",
            primary_model=primary_model,
            fallback_model=fallback_model,
        )

    def fallback_declined(self, primary_model: str, fallback_model: str) -> None:
        self._log.info(
            "resilience.fallback_declined",
            primary_model=primary_model,
            fallback_model=fallback_model,
        )
