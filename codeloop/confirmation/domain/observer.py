"""ConfirmationObserver port — domain events emitted by the confirmation gate."""

from typing import Protocol


class ConfirmationObserver(Protocol):
    def confirmation_skipped(self, call_id: str, name: str, reason: str) -> None: ...

    def confirmation_requested(self, call_id: str, name: str) -> None: ...

    def confirmation_resolved(self, call_id: str, name: str, decision: str) -> None: ...
