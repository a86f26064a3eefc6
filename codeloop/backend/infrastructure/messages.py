"""Conversion of conversation snapshots and tool schemas to OpenAI-style payloads."""

import json
from typing import Any

from codeloop.session.domain.conversation import (
    ConversationSnapshot,
    TextSegment,
    ToolCallSegment,
    ToolResultSegment,
    Turn,
)
from codeloop.tools.domain.registry import ToolSchema


def to_chat_messages(
    conversation: ConversationSnapshot, system_prompt: str | None = None
) -> list[dict[str, Any]]:
    """Flatten turns into chat messages; a tool turn becomes one message per result."""
    messages: list[dict[str, Any]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    for turn in conversation.turns:
        messages.extend(_turn_messages(turn))
    return messages


def to_tool_params(schemas: list[ToolSchema]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": schema.name,
                "description": schema.description,
                "parameters": schema.parameter_schema,
            },
        }
        for schema in schemas
    ]


def _turn_messages(turn: Turn) -> list[dict[str, Any]]:
    if turn.role == "user":
        return [{"role": "user", "content": _joined_text(turn)}]

    if turn.role == "model":
        message: dict[str, Any] = {"role": "assistant", "content": _joined_text(turn) or None}
        tool_calls = [
            {
                "id": segment.call_id,
                "type": "function",
                "function": {
                    "name": segment.name,
                    "arguments": json.dumps(segment.arguments),
                },
            }
            for segment in turn.segments
            if isinstance(segment, ToolCallSegment)
        ]
        if tool_calls:
            message["tool_calls"] = tool_calls
        return [message]

    return [
        {
            "role": "tool",
            "tool_call_id": segment.call_id,
            "name": segment.name,
            "content": json.dumps(segment.payload, default=str),
        }
        for segment in turn.segments
        if isinstance(segment, ToolResultSegment)
    ]


def _joined_text(turn: Turn) -> str:
    return "".join(
        segment.text for segment in turn.segments if isinstance(segment, TextSegment)
    )
