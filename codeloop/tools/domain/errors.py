"""Error types raised while resolving and running tools."""

from codeloop.core.errors import CodeloopError, ErrorCode


class UnknownToolError(CodeloopError):
    """Raised when the model requests a tool that is not registered."""

    code = ErrorCode.UNKNOWN_TOOL

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Failed to find tool: no tool named '{name}' is registered")


class InvalidArgumentsError(CodeloopError):
    """Raised when tool arguments do not match the tool's declared schema."""

    code = ErrorCode.INVALID_ARGUMENTS

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Failed to validate arguments for tool '{name}': {reason}")


class ToolExecutionError(CodeloopError):
    """Raised by a tool implementation when it cannot complete its work."""

    code = ErrorCode.TOOL_EXECUTION_FAILURE

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Failed to execute tool '{name}': {reason}")


class ToolRegistrationError(CodeloopError):
    """Raised when a tool cannot be added to a registry."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Failed to register tool '{name}': {reason}")
