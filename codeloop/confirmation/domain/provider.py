"""ApprovalProvider port — asks a human (or a policy) to approve a tool call."""

from typing import Protocol

from codeloop.confirmation.domain.decision import ApprovalRequest, ConfirmationDecision


class ApprovalProvider(Protocol):
    async def request_approval(
        self, request: ApprovalRequest
    ) -> ConfirmationDecision: ...
