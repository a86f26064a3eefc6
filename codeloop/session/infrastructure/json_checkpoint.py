"""JsonFileCheckpointer — stores one JSON snapshot file per session."""

import os
import re
import tempfile
from pathlib import Path

from pydantic import ValidationError

from codeloop.session.domain.conversation import ConversationSnapshot
from codeloop.session.domain.errors import CheckpointReadError, CheckpointWriteError

_SAFE_SESSION_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileCheckpointer:
    """Writes <directory>/<session_id>.json atomically (temp file, then rename).

    Satisfies the Checkpointer protocol structurally.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def path_for(self, session_id: str) -> Path:
        if not _SAFE_SESSION_ID.match(session_id) or session_id in {".", ".."}:
            raise CheckpointWriteError(
                session_id=session_id, reason="session id contains unsafe characters"
            )
        return self._directory / f"{session_id}.json"

    def save(self, session_id: str, snapshot: ConversationSnapshot) -> None:
        path = self.path_for(session_id)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=f".{session_id}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(snapshot.model_dump_json(indent=2))
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise CheckpointWriteError(session_id=session_id, reason=str(exc)) from exc

    def load(self, session_id: str) -> ConversationSnapshot | None:
        """Return the stored snapshot, or None if the session was never saved.

        Raises:
            CheckpointReadError: if the file exists but is not a valid snapshot.
        """
        path = self.path_for(session_id)
        if not path.is_file():
            return None
        try:
            return ConversationSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            raise CheckpointReadError(session_id=session_id, reason=str(exc)) from exc
