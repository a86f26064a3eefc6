"""EventRenderer — prints AgentEvents to a rich Console as they arrive."""

import json

from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from codeloop.session.domain.events import (
    AgentEvent,
    DoneEvent,
    ErrorEvent,
    TextChunkEvent,
    ToolRequestedEvent,
    ToolResultEvent,
)
from codeloop.tools.domain.result import (
    DiffDisplay,
    StructuredDisplay,
    TextDisplay,
    ToolCallResult,
)

# Longest stdout/stderr excerpt echoed for a command result.
_MAX_STREAM_CHARS = 2000


class EventRenderer:
    def __init__(self, console: Console) -> None:
        self._console = console
        self._mid_line = False

    def render(self, event: AgentEvent) -> None:
        if isinstance(event, TextChunkEvent):
            self._console.print(event.text, end="", markup=False, highlight=False)
            self._mid_line = not event.text.endswith("\n")
        elif isinstance(event, ToolRequestedEvent):
            self._end_line()
            arguments = json.dumps(event.request.arguments, default=str)
            self._console.print(
                Text.assemble(
                    ("→ ", "cyan"), (event.request.name, "bold cyan"), f" {arguments}"
                )
            )
        elif isinstance(event, ToolResultEvent):
            self._render_result(event.result)
        elif isinstance(event, ErrorEvent):
            self._end_line()
            self._console.print(
                Text(f"Error [{event.code}]: {event.message}", style="bold red")
            )
        elif isinstance(event, DoneEvent):
            self._end_line()
            if event.reason == "cancelled":
                self._console.print(Text("Turn cancelled.", style="yellow"))
            elif event.reason == "max_rounds":
                self._console.print(Text("Stopped: round limit reached.", style="yellow"))

    def _render_result(self, result: ToolCallResult) -> None:
        if result.status == "success":
            self._console.print(Text.assemble(("✓ ", "green"), (result.name, "bold")))
        else:
            message = result.error_detail.message if result.error_detail else ""
            self._console.print(
                Text.assemble(("✗ ", "red"), (result.name, "bold"), f" {message}")
            )

        display = result.display_payload
        if isinstance(display, TextDisplay):
            if display.text != (result.error_detail.message if result.error_detail else None):
                self._console.print(Text(display.text, style="dim"))
        elif isinstance(display, DiffDisplay):
            if display.diff:
                self._console.print(Syntax(display.diff, "diff", word_wrap=True))
        elif isinstance(display, StructuredDisplay):
            self._render_structured(display)

    def _render_structured(self, display: StructuredDisplay) -> None:
        if "exit_code" not in display.data:
            self._console.print_json(data=display.data)
            return
        # Command output: show the tail of each stream.
        for stream in ("stdout", "stderr"):
            output = str(display.data.get(stream) or "")
            if output:
                self._console.print(
                    Text(output[-_MAX_STREAM_CHARS:].rstrip(), style="dim")
                )

    def _end_line(self) -> None:
        if self._mid_line:
            self._console.print()
            self._mid_line = False
