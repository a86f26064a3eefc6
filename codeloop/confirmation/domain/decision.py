"""ConfirmationDecision and ApprovalRequest — the vocabulary of the approval step."""

from enum import StrEnum

from pydantic import BaseModel


class ConfirmationDecision(StrEnum):
    PROCEED_ONCE = "proceed_once"
    PROCEED_ALWAYS = "proceed_always"
    CANCEL = "cancel"


class ApprovalRequest(BaseModel, frozen=True):
    """What the user is shown when a tool call needs approval."""

    call_id: str
    name: str
    arguments: dict[str, object]
    detail: str
