"""ToolCallResult value object and the tagged display payloads it carries."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from codeloop.core.errors import ErrorCode


class TextDisplay(BaseModel, frozen=True):
    """Plain text for human presentation."""

    kind: Literal["text"] = "text"
    text: str


class DiffDisplay(BaseModel, frozen=True):
    """Unified diff of a file change."""

    kind: Literal["diff"] = "diff"
    file_path: str
    diff: str


class StructuredDisplay(BaseModel, frozen=True):
    """Structured data (e.g. command output split by stream)."""

    kind: Literal["structured"] = "structured"
    data: dict[str, object]


# Discriminated union — Pydantic selects the subtype from the `kind` field.
type DisplayPayload = Annotated[
    TextDisplay | DiffDisplay | StructuredDisplay,
    Field(discriminator="kind"),
]


class ErrorDetail(BaseModel, frozen=True):
    code: ErrorCode
    message: str


class ToolCallResult(BaseModel, frozen=True):
    """Outcome of one tool call.

    display_payload is for the human; model_payload is re-inserted into the
    conversation for the next backend round.
    """

    call_id: str
    name: str
    status: Literal["success", "error"]
    display_payload: DisplayPayload
    model_payload: dict[str, object]
    error_detail: ErrorDetail | None = None

    @classmethod
    def success(
        cls,
        call_id: str,
        name: str,
        llm_content: str,
        display: TextDisplay | DiffDisplay | StructuredDisplay,
    ) -> "ToolCallResult":
        return cls(
            call_id=call_id,
            name=name,
            status="success",
            display_payload=display,
            model_payload={"output": llm_content},
        )

    @classmethod
    def failure(
        cls,
        call_id: str,
        name: str,
        code: ErrorCode,
        message: str,
        display: TextDisplay | DiffDisplay | StructuredDisplay | None = None,
        llm_content: str | None = None,
    ) -> "ToolCallResult":
        model_payload: dict[str, object] = {"error": message, "code": code.value}
        if llm_content:
            model_payload["output"] = llm_content
        return cls(
            call_id=call_id,
            name=name,
            status="error",
            display_payload=display if display is not None else TextDisplay(text=message),
            model_payload=model_payload,
            error_detail=ErrorDetail(code=code, message=message),
        )
