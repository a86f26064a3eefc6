"""StreamChunk — one increment of a streamed model response."""

from pydantic import BaseModel, Field


class FunctionCall(BaseModel, frozen=True):
    """A complete function call emitted by the model.

    call_id is None when the backend did not assign one; the turn engine
    generates an identifier in that case.
    """

    call_id: str | None = None
    name: str
    arguments: dict[str, object] = Field(default_factory=dict)


class StreamChunk(BaseModel, frozen=True):
    text: str | None = None
    function_calls: tuple[FunctionCall, ...] = ()
