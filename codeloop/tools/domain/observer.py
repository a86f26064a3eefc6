"""ToolObserver port — domain events emitted during tool invocations."""

from typing import Protocol


class ToolObserver(Protocol):
    """Observer port for tool domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def tool_invocation_started(self, call_id: str, name: str) -> None: ...

    def tool_invocation_completed(
        self, call_id: str, name: str, duration_ms: int
    ) -> None: ...

    def tool_invocation_failed(
        self, call_id: str, name: str, code: str, reason: str
    ) -> None: ...
