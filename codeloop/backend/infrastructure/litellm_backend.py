"""LiteLLMBackend — ModelBackend implementation that streams through LiteLLM."""

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import litellm

from codeloop.backend.domain.chunk import FunctionCall, StreamChunk
from codeloop.backend.domain.errors import BackendRateLimitedError, BackendRequestError
from codeloop.backend.infrastructure.messages import to_chat_messages, to_tool_params
from codeloop.backend.infrastructure.rate_limit import is_rate_limit_error
from codeloop.config.domain.config import BackendConfig
from codeloop.session.domain.conversation import ConversationSnapshot
from codeloop.tools.domain.registry import ToolSchema

# Key under which arguments that are not a JSON object are passed on, so that
# argument validation reports them instead of the stream failing.
UNPARSED_ARGUMENTS_KEY = "__unparsed_arguments__"


@dataclass
class _PendingCall:
    """Tool call being assembled from streamed deltas."""

    call_id: str | None = None
    name: str = ""
    argument_parts: list[str] = field(default_factory=list)

    def to_function_call(self) -> FunctionCall:
        return FunctionCall(
            call_id=self.call_id,
            name=self.name,
            arguments=_parse_arguments("".join(self.argument_parts)),
        )


class LiteLLMBackend:
    """Streams chat completions; text is yielded as it arrives, tool calls once complete.

    Satisfies the ModelBackend protocol structurally.
    """

    def __init__(self, config: BackendConfig, system_prompt: str | None = None) -> None:
        litellm.suppress_debug_info = True
        self._config = config
        self._system_prompt = system_prompt

    async def stream(
        self,
        model: str,
        conversation: ConversationSnapshot,
        tools: list[ToolSchema],
    ) -> AsyncIterator[StreamChunk]:
        """Stream one response from model.

        Raises:
            BackendRateLimitedError: if the provider signals a rate limit.
            BackendRequestError: for any other provider failure.
        """
        request: dict[str, Any] = {
            "model": model,
            "messages": to_chat_messages(conversation, self._system_prompt),
            "temperature": self._config.temperature,
            "stream": True,
        }
        if tools:
            request["tools"] = to_tool_params(tools)
        if self._config.api_base:
            request["api_base"] = self._config.api_base
        if self._config.api_key:
            request["api_key"] = self._config.api_key

        try:
            response = await litellm.acompletion(**request)
        except Exception as exc:
            raise _translate(exc=exc, model=model) from exc

        pending: dict[int, _PendingCall] = {}
        try:
            async for part in response:
                if not part.choices:
                    continue
                delta = part.choices[0].delta
                text = getattr(delta, "content", None)
                if text:
                    yield StreamChunk(text=text)
                for tool_call in getattr(delta, "tool_calls", None) or []:
                    _accumulate(pending, tool_call)
        except (BackendRateLimitedError, BackendRequestError):
            raise
        except Exception as exc:
            raise _translate(exc=exc, model=model) from exc

        if pending:
            yield StreamChunk(
                function_calls=tuple(
                    pending[index].to_function_call() for index in sorted(pending)
                )
            )


def _accumulate(pending: dict[int, _PendingCall], tool_call: Any) -> None:
    index = getattr(tool_call, "index", None)
    if index is None:
        index = len(pending)
    call = pending.setdefault(index, _PendingCall())
    if getattr(tool_call, "id", None):
        call.call_id = tool_call.id
    function = getattr(tool_call, "function", None)
    if function is None:
        return
    if getattr(function, "name", None):
        call.name = function.name
    if getattr(function, "arguments", None):
        call.argument_parts.append(function.arguments)


def _parse_arguments(raw: str) -> dict[str, object]:
    if not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {UNPARSED_ARGUMENTS_KEY: raw}
    if not isinstance(parsed, dict):
        return {UNPARSED_ARGUMENTS_KEY: raw}
    return parsed


def _translate(exc: Exception, model: str) -> BackendRateLimitedError | BackendRequestError:
    if is_rate_limit_error(exc):
        return BackendRateLimitedError(model=model, reason=str(exc))
    return BackendRequestError(model=model, reason=str(exc))
