"""AgentConfig aggregate — the root configuration object for a codeloop session."""

from pathlib import Path

from pydantic import BaseModel, Field

type AuthType = str


class BackendConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    fallback_model: str | None = None
    api_base: str | None = None
    api_key: str | None = None
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    auth_type: AuthType | None = None


class ResilienceConfig(BaseModel, frozen=True):
    failure_threshold: int = Field(default=3, ge=1)
    recovery_seconds: float = Field(default=60.0, ge=0.0)
    # Empty means fallback is permitted for every auth type.
    fallback_auth_types: list[AuthType] = Field(default_factory=list)


class ToolsConfig(BaseModel, frozen=True):
    root_dir: Path
    shell_timeout_seconds: float = Field(default=120.0, gt=0.0)
    web_fetch_timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_read_bytes: int = Field(default=1_048_576, ge=1)
    allow_private_hosts: bool = False
    # Extra tools that run without confirmation, beyond the built-in read-only ones.
    read_only_tools: list[str] = Field(default_factory=list)


class SessionConfig(BaseModel, frozen=True):
    max_rounds: int = Field(default=25, ge=1)
    system_prompt: str | None = None
    checkpoint_dir: Path | None = None


class AgentConfig(BaseModel, frozen=True):
    """Root configuration aggregate for a codeloop session."""

    backend: BackendConfig
    tools: ToolsConfig
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    @classmethod
    def default(cls, root_dir: Path, model: str = "gpt-4o-mini") -> "AgentConfig":
        """Build a config for root_dir when no config file is given."""
        return cls(
            backend=BackendConfig(model=model),
            tools=ToolsConfig(root_dir=root_dir),
        )

    def with_overrides(
        self,
        root_dir: Path | None = None,
        model: str | None = None,
        fallback_model: str | None = None,
    ) -> "AgentConfig":
        """Return a copy with command-line overrides applied; None keeps the value."""
        backend_updates: dict[str, object] = {}
        if model is not None:
            backend_updates["model"] = model
        if fallback_model is not None:
            backend_updates["fallback_model"] = fallback_model

        tools = self.tools
        if root_dir is not None:
            tools = tools.model_copy(update={"root_dir": root_dir})

        return self.model_copy(
            update={
                "backend": self.backend.model_copy(update=backend_updates),
                "tools": tools,
            }
        )
