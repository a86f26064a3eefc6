"""SessionObserver port — domain events emitted by the turn engine."""

from typing import Protocol


class SessionObserver(Protocol):
    """Observer port for session domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def turn_started(self, session_id: str, prompt_chars: int) -> None: ...

    def round_started(self, session_id: str, round_number: int) -> None: ...

    def turn_completed(self, session_id: str, rounds: int, reason: str) -> None: ...

    def turn_failed(self, session_id: str, code: str, reason: str) -> None: ...

    def checkpoint_failed(self, session_id: str, reason: str) -> None: ...
