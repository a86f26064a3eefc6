"""TurnEngine — drives backend rounds and tool calls for one user prompt."""

import asyncio
import contextlib
import uuid
from collections.abc import AsyncIterator

from codeloop.backend.application.resilience import ResilienceController
from codeloop.backend.domain.chunk import FunctionCall
from codeloop.backend.domain.errors import BackendRateLimitedError, BackendRequestError
from codeloop.confirmation.application.gate import ConfirmationGate
from codeloop.confirmation.domain.decision import ConfirmationDecision
from codeloop.core.cancellation import (
    OperationCancelledError,
    iterate_cancellable,
    run_cancellable,
)
from codeloop.core.errors import ErrorCode
from codeloop.session.domain.checkpoint import Checkpointer
from codeloop.session.domain.conversation import ConversationSnapshot, ConversationState
from codeloop.session.domain.errors import CheckpointWriteError, TurnInProgressError
from codeloop.session.domain.events import (
    AgentEvent,
    DoneEvent,
    DoneReason,
    ErrorEvent,
    TextChunkEvent,
    ToolRequestedEvent,
    ToolResultEvent,
)
from codeloop.session.domain.observer import SessionObserver
from codeloop.tools.application.invoker import ToolInvoker
from codeloop.tools.domain.registry import ToolRegistry
from codeloop.tools.domain.request import ToolCallRequest
from codeloop.tools.domain.result import ToolCallResult


class TurnEngine:
    """The agent loop for one session.

    Each call to run_turn appends the prompt, then repeats: stream a model
    response, and if it requested tools, authorize and run each call in order
    and feed the results back, until the model answers without tool calls.
    The engine owns its ConversationState; callers only ever see snapshots.
    """

    def __init__(
        self,
        session_id: str,
        resilience: ResilienceController,
        gate: ConfirmationGate,
        invoker: ToolInvoker,
        registry: ToolRegistry,
        observer: SessionObserver,
        max_rounds: int = 25,
        auth_type: str | None = None,
        checkpointer: Checkpointer | None = None,
        conversation: ConversationState | None = None,
    ) -> None:
        self._session_id = session_id
        self._resilience = resilience
        self._gate = gate
        self._invoker = invoker
        self._registry = registry
        self._observer = observer
        self._max_rounds = max_rounds
        self._auth_type = auth_type
        self._checkpointer = checkpointer
        self._conversation = conversation if conversation is not None else ConversationState()
        self._running = False

    @property
    def session_id(self) -> str:
        return self._session_id

    def snapshot(self) -> ConversationSnapshot:
        return self._conversation.snapshot()

    async def run_turn(
        self, prompt: str, cancel: asyncio.Event | None = None
    ) -> AsyncIterator[AgentEvent]:
        """Yield the events of one turn; the last event is always error or done.

        Raises:
            TurnInProgressError: if another turn of this session is running.
        """
        if self._running:
            raise TurnInProgressError(session_id=self._session_id)
        self._running = True
        try:
            async for event in self._run(prompt=prompt, cancel=cancel or asyncio.Event()):
                yield event
        finally:
            self._running = False

    async def _run(self, prompt: str, cancel: asyncio.Event) -> AsyncIterator[AgentEvent]:
        self._observer.turn_started(session_id=self._session_id, prompt_chars=len(prompt))
        self._conversation.append_user_text(prompt)
        schemas = self._registry.list_schemas()

        for round_number in range(1, self._max_rounds + 1):
            if cancel.is_set():
                self._conversation.discard_pending_prompt()
                yield self._finish(reason="cancelled", rounds=round_number - 1)
                return
            self._observer.round_started(
                session_id=self._session_id, round_number=round_number
            )

            text_parts: list[str] = []
            requests: list[ToolCallRequest] = []
            stream = self._resilience.stream_response(
                conversation=self._conversation.snapshot(),
                tools=schemas,
                auth_type=self._auth_type,
            )
            try:
                async with contextlib.aclosing(stream):
                    async for chunk in iterate_cancellable(stream, cancel):
                        if chunk.text:
                            text_parts.append(chunk.text)
                            yield TextChunkEvent(text=chunk.text)
                        requests.extend(_to_request(call) for call in chunk.function_calls)
            except OperationCancelledError:
                self._conversation.discard_pending_prompt()
                yield self._finish(reason="cancelled", rounds=round_number)
                return
            except (BackendRateLimitedError, BackendRequestError) as exc:
                self._conversation.discard_pending_prompt()
                self._observer.turn_failed(
                    session_id=self._session_id, code=exc.code.value, reason=str(exc)
                )
                yield ErrorEvent(code=exc.code, message=str(exc))
                return

            self._conversation.append_model_turn(text="".join(text_parts), requests=requests)
            if not requests:
                yield self._finish(reason="completed", rounds=round_number)
                return

            for index, request in enumerate(requests):
                yield ToolRequestedEvent(request=request)
                try:
                    result = await self._authorize_and_invoke(request=request, cancel=cancel)
                except OperationCancelledError:
                    for unfinished in requests[index:]:
                        self._conversation.append_tool_result(_cancelled_result(unfinished))
                    yield self._finish(reason="cancelled", rounds=round_number)
                    return
                self._conversation.append_tool_result(result)
                yield ToolResultEvent(result=result)

            self._save_checkpoint()

        yield self._finish(reason="max_rounds", rounds=self._max_rounds)

    async def _authorize_and_invoke(
        self, request: ToolCallRequest, cancel: asyncio.Event
    ) -> ToolCallResult:
        decision = await run_cancellable(self._gate.authorize(request), cancel)
        if decision is ConfirmationDecision.CANCEL:
            return ToolCallResult.failure(
                call_id=request.call_id,
                name=request.name,
                code=ErrorCode.USER_DECLINED,
                message=f"User declined to run tool '{request.name}'.",
            )
        return await run_cancellable(self._invoker.invoke(request, cancel), cancel)

    def _finish(self, reason: DoneReason, rounds: int) -> DoneEvent:
        self._save_checkpoint()
        self._observer.turn_completed(
            session_id=self._session_id, rounds=rounds, reason=reason
        )
        return DoneEvent(reason=reason)

    def _save_checkpoint(self) -> None:
        if self._checkpointer is None:
            return
        try:
            self._checkpointer.save(self._session_id, self._conversation.snapshot())
        except CheckpointWriteError as exc:
            self._observer.checkpoint_failed(session_id=self._session_id, reason=str(exc))


def _to_request(call: FunctionCall) -> ToolCallRequest:
    call_id = call.call_id or f"{call.name}-{uuid.uuid4().hex[:12]}"
    return ToolCallRequest(call_id=call_id, name=call.name, arguments=call.arguments)


def _cancelled_result(request: ToolCallRequest) -> ToolCallResult:
    return ToolCallResult.failure(
        call_id=request.call_id,
        name=request.name,
        code=ErrorCode.CANCELLED,
        message=f"Tool call '{request.name}' was cancelled before it completed.",
    )
