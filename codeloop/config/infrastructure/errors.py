"""Errors raised while reading and validating a codeloop config file."""

from pathlib import Path

from codeloop.core.errors import CodeloopError


class MissingEnvVarsError(CodeloopError):
    """Raised when ${VAR} references without a default point at unset variables."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        super().__init__(
            "Failed to load config: unset environment variables: "
            + ", ".join(sorted(missing_vars))
        )


class ConfigValidationError(CodeloopError):
    """Raised when the parsed document does not match the AgentConfig schema."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate config: {reason}")


class ConfigLoadError(CodeloopError):
    """Raised when the config file is missing, unreadable or not valid YAML."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        super().__init__(f"Failed to load config {path}: {reason}")
