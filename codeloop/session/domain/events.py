"""AgentEvent — the observable event stream produced by one call to run_turn."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from codeloop.core.errors import ErrorCode
from codeloop.tools.domain.request import ToolCallRequest
from codeloop.tools.domain.result import ToolCallResult

type DoneReason = Literal["completed", "cancelled", "max_rounds"]


class TextChunkEvent(BaseModel, frozen=True):
    type: Literal["text_chunk"] = "text_chunk"
    text: str


class ToolRequestedEvent(BaseModel, frozen=True):
    type: Literal["tool_requested"] = "tool_requested"
    request: ToolCallRequest


class ToolResultEvent(BaseModel, frozen=True):
    type: Literal["tool_result"] = "tool_result"
    result: ToolCallResult


class ErrorEvent(BaseModel, frozen=True):
    type: Literal["error"] = "error"
    code: ErrorCode
    message: str


class DoneEvent(BaseModel, frozen=True):
    type: Literal["done"] = "done"
    reason: DoneReason = "completed"


# Tagged on `type`, so serialized events validate back to the right variant.
type AgentEvent = Annotated[
    TextChunkEvent | ToolRequestedEvent | ToolResultEvent | ErrorEvent | DoneEvent,
    Field(discriminator="type"),
]
