"""Structlog implementation of the ConfirmationObserver port."""

import structlog


class StructlogConfirmationObserver:
    """Delegates confirmation domain events to structlog.

    Satisfies the ConfirmationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def confirmation_skipped(self, call_id: str, name: str, reason: str) -> None:
        self._log.debug(
            "confirmation.skipped", call_id=call_id, name=name, reason=reason
        )

    def confirmation_requested(self, call_id: str, name: str) -> None:
        self._log.debug("confirmation.requested", call_id=call_id, name=name)

    def confirmation_resolved(self, call_id: str, name: str, decision: str) -> None:
        self._log.info(
            "confirmation.resolved", call_id=call_id, name=name, decision=decision
        )
