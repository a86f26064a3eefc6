"""ConfirmationGate — decides whether a tool call may run."""

import json

from pydantic import ValidationError

from codeloop.confirmation.domain.allow_list import AllowList
from codeloop.confirmation.domain.decision import ApprovalRequest, ConfirmationDecision
from codeloop.confirmation.domain.observer import ConfirmationObserver
from codeloop.confirmation.domain.provider import ApprovalProvider
from codeloop.core.errors import CodeloopError
from codeloop.tools.domain.registry import ToolRegistry
from codeloop.tools.domain.request import ToolCallRequest


class ConfirmationGate:
    """Consults the user before side-effecting tool calls.

    Read-only tools, tools listed in auto_approved_tools and calls covered by a
    previous proceed_always decision are approved without asking. Unknown tools
    pass through so the invoker can report them.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        approval_provider: ApprovalProvider,
        observer: ConfirmationObserver,
        allow_list: AllowList | None = None,
        auto_approved_tools: frozenset[str] = frozenset(),
    ) -> None:
        self._registry = registry
        self._approval_provider = approval_provider
        self._observer = observer
        self._allow_list = allow_list if allow_list is not None else AllowList()
        self._auto_approved_tools = auto_approved_tools

    @property
    def allow_list(self) -> AllowList:
        return self._allow_list

    async def authorize(self, request: ToolCallRequest) -> ConfirmationDecision:
        schema = self._registry.get_schema(request.name)
        if schema is None:
            return self._skip(request=request, reason="unknown_tool")
        if schema.read_only or schema.name in self._auto_approved_tools:
            return self._skip(request=request, reason="read_only")

        key = self._allow_list.key_for(schema=schema, arguments=request.arguments)
        if self._allow_list.covers(key):
            return self._skip(request=request, reason="allow_list")

        self._observer.confirmation_requested(
            call_id=request.call_id, name=request.name
        )
        decision = await self._approval_provider.request_approval(
            ApprovalRequest(
                call_id=request.call_id,
                name=request.name,
                arguments=request.arguments,
                detail=self._describe(request),
            )
        )
        if decision is ConfirmationDecision.PROCEED_ALWAYS:
            self._allow_list.grant(key)

        self._observer.confirmation_resolved(
            call_id=request.call_id, name=request.name, decision=decision.value
        )
        return decision

    def _skip(self, request: ToolCallRequest, reason: str) -> ConfirmationDecision:
        self._observer.confirmation_skipped(
            call_id=request.call_id, name=request.name, reason=reason
        )
        return ConfirmationDecision.PROCEED_ONCE

    def _describe(self, request: ToolCallRequest) -> str:
        try:
            return self._registry.describe(name=request.name, arguments=request.arguments)
        except (ValidationError, CodeloopError):
            # The invoker reports the problem; show the raw call meanwhile.
            return f"{request.name}({json.dumps(request.arguments, default=str)})"
