"""ConversationState — the ordered turns exchanged between user, model and tools."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from codeloop.tools.domain.request import ToolCallRequest
from codeloop.tools.domain.result import ToolCallResult


class TextSegment(BaseModel, frozen=True):
    kind: Literal["text"] = "text"
    text: str


class ToolCallSegment(BaseModel, frozen=True):
    kind: Literal["tool_call"] = "tool_call"
    call_id: str
    name: str
    arguments: dict[str, object]


class ToolResultSegment(BaseModel, frozen=True):
    kind: Literal["tool_result"] = "tool_result"
    call_id: str
    name: str
    status: Literal["success", "error"]
    payload: dict[str, object]


type Segment = Annotated[
    TextSegment | ToolCallSegment | ToolResultSegment,
    Field(discriminator="kind"),
]

type Role = Literal["user", "model", "tool"]


class Turn(BaseModel, frozen=True):
    role: Role
    segments: tuple[Segment, ...]


class ConversationSnapshot(BaseModel, frozen=True):
    """Read-only copy of a conversation, safe to hand to backends and checkpointers."""

    turns: tuple[Turn, ...] = ()


class ConversationState:
    """Mutable, append-only conversation owned by a single TurnEngine.

    The results of one round are collected into a single tool turn, in the
    order they are appended.
    """

    def __init__(self, turns: tuple[Turn, ...] | list[Turn] = ()) -> None:
        self._turns: list[Turn] = list(turns)

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def append_user_text(self, text: str) -> None:
        self._turns.append(Turn(role="user", segments=(TextSegment(text=text),)))

    def append_model_turn(self, text: str, requests: list[ToolCallRequest]) -> None:
        segments: list[TextSegment | ToolCallSegment] = []
        if text:
            segments.append(TextSegment(text=text))
        segments.extend(
            ToolCallSegment(
                call_id=request.call_id, name=request.name, arguments=request.arguments
            )
            for request in requests
        )
        self._turns.append(Turn(role="model", segments=tuple(segments)))

    def discard_pending_prompt(self) -> None:
        """Drop a trailing user turn that never received a model response."""
        if self._turns and self._turns[-1].role == "user":
            self._turns.pop()

    def append_tool_result(self, result: ToolCallResult) -> None:
        segment = ToolResultSegment(
            call_id=result.call_id,
            name=result.name,
            status=result.status,
            payload=result.model_payload,
        )
        if self._turns and self._turns[-1].role == "tool":
            last = self._turns[-1]
            self._turns[-1] = Turn(role="tool", segments=(*last.segments, segment))
        else:
            self._turns.append(Turn(role="tool", segments=(segment,)))

    def snapshot(self) -> ConversationSnapshot:
        # Turns and segments are frozen, so sharing them is safe; the dict
        # payloads are the only mutable leaves and are deep-copied.
        return ConversationSnapshot(turns=tuple(self._turns)).model_copy(deep=True)

    @classmethod
    def from_snapshot(cls, snapshot: ConversationSnapshot) -> "ConversationState":
        return cls(turns=snapshot.model_copy(deep=True).turns)
