"""ResilienceObserver port — circuit breaker and fallback events."""

from typing import Protocol


class ResilienceObserver(Protocol):
    def backend_request_started(self, model: str, is_fallback: bool) -> None: ...

    def backend_request_failed(
        self, model: str, rate_limited: bool, reason: str
    ) -> None: ...

    def circuit_state_changed(
        self, previous: str, current: str, consecutive_failures: int
    ) -> None: ...

    def fallback_engaged(self, primary_model: str, fallback_model: str) -> None: ...

    def fallback_declined(self, primary_model: str, fallback_model: str) -> None: ...
