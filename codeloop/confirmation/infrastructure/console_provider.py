"""Rich-based approval providers for interactive and unattended sessions."""

import asyncio
import json
from typing import TextIO

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.syntax import Syntax
from rich.text import Text

from codeloop.confirmation.domain.decision import ApprovalRequest, ConfirmationDecision

_CHOICES: dict[str, ConfirmationDecision] = {
    "y": ConfirmationDecision.PROCEED_ONCE,
    "a": ConfirmationDecision.PROCEED_ALWAYS,
    "n": ConfirmationDecision.CANCEL,
}


class ConsoleApprovalProvider:
    """Shows the pending call in a panel and reads y/a/n from the terminal.

    The blocking prompt runs in a worker thread so the event loop keeps
    serving cancellation while the user decides.
    """

    def __init__(
        self, console: Console | None = None, input_stream: TextIO | None = None
    ) -> None:
        self._console = console or Console(stderr=True)
        self._input_stream = input_stream

    async def request_approval(self, request: ApprovalRequest) -> ConfirmationDecision:
        return await asyncio.to_thread(self._prompt, request)

    def _prompt(self, request: ApprovalRequest) -> ConfirmationDecision:
        body = (
            Syntax(request.detail, "diff", word_wrap=True)
            if "\n@@ " in request.detail
            else Text(request.detail)
        )
        self._console.print(
            Panel(body, title=f"[bold yellow]{request.name}[/]", subtitle=request.call_id)
        )
        if request.arguments:
            self._console.print(
                json.dumps(request.arguments, indent=2, default=str),
                style="dim",
                markup=False,
                highlight=False,
            )
        answer = Prompt.ask(
            "Allow? \\[y] once, \\[a] always, \\[n] no",
            console=self._console,
            choices=list(_CHOICES),
            default="n",
            show_choices=False,
            stream=self._input_stream,
        )
        return _CHOICES[answer]


class AutoApprovalProvider:
    """Approves every call once; used with --yes."""

    async def request_approval(self, request: ApprovalRequest) -> ConfirmationDecision:
        return ConfirmationDecision.PROCEED_ONCE
