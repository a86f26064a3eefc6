"""Checkpointer port — persists conversation snapshots between rounds."""

from typing import Protocol

from codeloop.session.domain.conversation import ConversationSnapshot


class Checkpointer(Protocol):
    def save(self, session_id: str, snapshot: ConversationSnapshot) -> None:
        """Persist snapshot for session_id.

        Raises:
            CheckpointWriteError: if the snapshot cannot be written.
        """
        ...

    def load(self, session_id: str) -> ConversationSnapshot | None: ...
