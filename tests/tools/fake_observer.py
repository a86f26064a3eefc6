"""FakeToolObserver — records tool domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InvocationStartedEvent:
    call_id: str
    name: str


@dataclass(frozen=True)
class InvocationCompletedEvent:
    call_id: str
    name: str
    duration_ms: int


@dataclass(frozen=True)
class InvocationFailedEvent:
    call_id: str
    name: str
    code: str
    reason: str


class FakeToolObserver:
    """Records all emitted tool events as typed frozen dataclasses."""

    def __init__(self) -> None:
        self.started: list[InvocationStartedEvent] = []
        self.completed: list[InvocationCompletedEvent] = []
        self.failed: list[InvocationFailedEvent] = []

    def tool_invocation_started(self, call_id: str, name: str) -> None:
        self.started.append(InvocationStartedEvent(call_id=call_id, name=name))

    def tool_invocation_completed(
        self, call_id: str, name: str, duration_ms: int
    ) -> None:
        self.completed.append(
            InvocationCompletedEvent(call_id=call_id, name=name, duration_ms=duration_ms)
        )

    def tool_invocation_failed(
        self, call_id: str, name: str, code: str, reason: str
    ) -> None:
        self.failed.append(
            InvocationFailedEvent(call_id=call_id, name=name, code=code, reason=reason)
        )
