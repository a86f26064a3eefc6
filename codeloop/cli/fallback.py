"""ConsoleFallbackHandler — asks on the terminal before switching models."""

import asyncio
from typing import TextIO

from rich.console import Console
from rich.prompt import Confirm


class ConsoleFallbackHandler:
    """Satisfies the FallbackHandler protocol structurally."""

    def __init__(
        self, console: Console | None = None, input_stream: TextIO | None = None
    ) -> None:
        self._console = console or Console(stderr=True)
        self._input_stream = input_stream

    async def confirm_fallback(self, primary_model: str, fallback_model: str) -> bool:
        return await asyncio.to_thread(self._ask, primary_model, fallback_model)

    def _ask(self, primary_model: str, fallback_model: str) -> bool:
        return Confirm.ask(
            f"[yellow]{primary_model}[/] is rate limited. Switch to"
            f" [cyan]{fallback_model}[/] for this session?",
            console=self._console,
            default=True,
            stream=self._input_stream,
        )
