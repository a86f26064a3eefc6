"""FakeConfirmationObserver — records confirmation events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SkippedEvent:
    call_id: str
    name: str
    reason: str


@dataclass(frozen=True)
class RequestedEvent:
    call_id: str
    name: str


@dataclass(frozen=True)
class ResolvedEvent:
    call_id: str
    name: str
    decision: str


class FakeConfirmationObserver:
    def __init__(self) -> None:
        self.skipped: list[SkippedEvent] = []
        self.requested: list[RequestedEvent] = []
        self.resolved: list[ResolvedEvent] = []

    def confirmation_skipped(self, call_id: str, name: str, reason: str) -> None:
        self.skipped.append(SkippedEvent(call_id=call_id, name=name, reason=reason))

    def confirmation_requested(self, call_id: str, name: str) -> None:
        self.requested.append(RequestedEvent(call_id=call_id, name=name))

    def confirmation_resolved(self, call_id: str, name: str, decision: str) -> None:
        self.resolved.append(ResolvedEvent(call_id=call_id, name=name, decision=decision))
