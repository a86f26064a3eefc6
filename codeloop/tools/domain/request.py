"""ToolCallRequest value object — one tool invocation requested by the model."""

from pydantic import BaseModel, Field


class ToolCallRequest(BaseModel, frozen=True):
    """Immutable request created when the backend stream yields a function call."""

    call_id: str = Field(min_length=1)
    name: str
    arguments: dict[str, object]
