"""Error types raised by the session context."""

from codeloop.core.errors import CodeloopError


class TurnInProgressError(CodeloopError):
    """Raised when run_turn is called while another turn of the session is running."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Failed to start turn: session '{session_id}' already has a turn in progress"
        )


class CheckpointWriteError(CodeloopError):
    """Raised when a conversation snapshot cannot be persisted."""

    def __init__(self, session_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to write checkpoint for session '{session_id}': {reason}",
            retriable=True,
        )


class CheckpointReadError(CodeloopError):
    """Raised when a stored snapshot exists but cannot be parsed."""

    def __init__(self, session_id: str, reason: str) -> None:
        super().__init__(
            f"Failed to read checkpoint for session '{session_id}': {reason}"
        )
