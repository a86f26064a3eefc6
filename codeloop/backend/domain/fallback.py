"""FallbackHandler port — lets the user approve switching to the fallback model."""

from typing import Protocol


class FallbackHandler(Protocol):
    async def confirm_fallback(self, primary_model: str, fallback_model: str) -> bool: ...
