"""Error types raised by the security validator."""

from codeloop.core.errors import CodeloopError, ErrorCode


class PathEscapeError(CodeloopError):
    """Raised when a path resolves outside the configured root directory."""

    code = ErrorCode.PATH_ESCAPE

    def __init__(self, path: str, root: str) -> None:
        self.path = path
        self.root = root
        super().__init__(
            f"Failed to validate path: '{path}' resolves outside of root '{root}'"
        )


class UnsafeCommandError(CodeloopError):
    """Raised when a shell command fails command validation."""

    code = ErrorCode.UNSAFE_COMMAND

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to validate command: {reason}")
