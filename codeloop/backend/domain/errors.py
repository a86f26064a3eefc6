"""Error types raised by model backends and the resilience controller."""

from codeloop.core.errors import CodeloopError, ErrorCode


class BackendRateLimitedError(CodeloopError):
    """Raised when the backend signals a rate limit or quota exhaustion."""

    code = ErrorCode.BACKEND_RATE_LIMITED

    def __init__(self, model: str, reason: str) -> None:
        self.model = model
        super().__init__(
            f"Failed to get response from '{model}': rate limited: {reason}",
            retriable=True,
        )


class BackendRequestError(CodeloopError):
    """Raised for any backend failure that is not a rate limit."""

    code = ErrorCode.BACKEND_REQUEST_FAILED

    def __init__(self, model: str, reason: str) -> None:
        self.model = model
        super().__init__(f"Failed to get response from '{model}': {reason}")
