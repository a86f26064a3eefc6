"""Structlog implementation of the ToolObserver port."""

import structlog


class StructlogToolObserver:
    """Delegates tool domain events to structlog.

    Satisfies the ToolObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def tool_invocation_started(self, call_id: str, name: str) -> None:
        self._log.debug("tool.invocation_started", call_id=call_id, name=name)

    def tool_invocation_completed(
        self, call_id: str, name: str, duration_ms: int
    ) -> None:
        self._log.info(
            "tool.invocation_completed",
            call_id=call_id,
            name=name,
            duration_ms=duration_ms,
        )

    def tool_invocation_failed(
        self, call_id: str, name: str, code: str, reason: str
    ) -> None:
        self._log.warning(
            "tool.invocation_failed",
            call_id=call_id,
            name=name,
            code=code,
            reason=reason,
        )
