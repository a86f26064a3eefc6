"""Structlog implementation of the SessionObserver port."""

import structlog


class StructlogSessionObserver:
    """Delegates session domain events to structlog.

    Satisfies the SessionObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def turn_started(self, session_id: str, prompt_chars: int) -> None:
        self._log.info(
            "session.turn_started", session_id=session_id, prompt_chars=prompt_chars
        )

    def round_started(self, session_id: str, round_number: int) -> None:
        self._log.debug(
            "session.round_started", session_id=session_id, round_number=round_number
        )

    def turn_completed(self, session_id: str, rounds: int, reason: str) -> None:
        self._log.info(
            "session.turn_completed", session_id=session_id, rounds=rounds, reason=reason
        )

    def turn_failed(self, session_id: str, code: str, reason: str) -> None:
        self._log.error(
            "session.turn_failed", session_id=session_id, code=code, reason=reason
        )

    def checkpoint_failed(self, session_id: str, reason: str) -> None:
        self._log.warning(
            "session.checkpoint_failed", session_id=session_id, reason=reason
        )
