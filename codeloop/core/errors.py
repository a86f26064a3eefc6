"""Base exception class and error taxonomy for all codeloop-specific errors."""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error codes reported to the model and surfaced in agent events."""

    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    PATH_ESCAPE = "PATH_ESCAPE"
    UNSAFE_COMMAND = "UNSAFE_COMMAND"
    TOOL_EXECUTION_FAILURE = "TOOL_EXECUTION_FAILURE"
    BACKEND_RATE_LIMITED = "BACKEND_RATE_LIMITED"
    BACKEND_REQUEST_FAILED = "BACKEND_REQUEST_FAILED"
    USER_DECLINED = "USER_DECLINED"
    CANCELLED = "CANCELLED"


class CodeloopError(Exception):
    """Base class for all codeloop errors."""

    code: ErrorCode | None = None

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
