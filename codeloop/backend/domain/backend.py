"""ModelBackend port — streams a model response for a conversation."""

from collections.abc import AsyncIterator
from typing import Protocol

from codeloop.backend.domain.chunk import StreamChunk
from codeloop.session.domain.conversation import ConversationSnapshot
from codeloop.tools.domain.registry import ToolSchema


class ModelBackend(Protocol):
    def stream(
        self,
        model: str,
        conversation: ConversationSnapshot,
        tools: list[ToolSchema],
    ) -> AsyncIterator[StreamChunk]:
        """Stream the model's next message.

        Raises:
            BackendRateLimitedError: if the provider signals a rate limit.
            BackendRequestError: for any other provider failure.
        """
        ...
