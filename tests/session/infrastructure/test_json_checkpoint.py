"""Tests for JsonFileCheckpointer."""

from pathlib import Path

import pytest

from codeloop.session.domain.conversation import ConversationState
from codeloop.session.domain.errors import CheckpointReadError, CheckpointWriteError
from codeloop.session.infrastructure.json_checkpoint import JsonFileCheckpointer
from codeloop.tools.domain.request import ToolCallRequest


def _state() -> ConversationState:
    state = ConversationState()
    state.append_user_text("hello")
    state.append_model_turn(
        text="Checking.",
        requests=[ToolCallRequest(call_id="c1", name="read_file", arguments={"path": "/r/a"})],
    )
    return state


class TestSave:
    def test_writes_one_file_per_session(self, tmp_path: Path) -> None:
        checkpointer = JsonFileCheckpointer(directory=tmp_path / "sessions")

        checkpointer.save("abc", _state().snapshot())

        assert (tmp_path / "sessions" / "abc.json").is_file()

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        checkpointer = JsonFileCheckpointer(directory=tmp_path)

        checkpointer.save("abc", _state().snapshot())
        checkpointer.save("abc", _state().snapshot())

        assert [p.name for p in tmp_path.iterdir()] == ["abc.json"]

    @pytest.mark.parametrize("session_id", ["../escape", "a/b", "..", ""])
    def test_rejects_unsafe_session_ids(self, tmp_path: Path, session_id: str) -> None:
        checkpointer = JsonFileCheckpointer(directory=tmp_path)

        with pytest.raises(CheckpointWriteError):
            checkpointer.save(session_id, _state().snapshot())

    def test_unwritable_directory_raises_write_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        checkpointer = JsonFileCheckpointer(directory=blocker / "sessions")

        with pytest.raises(CheckpointWriteError) as exc_info:
            checkpointer.save("abc", _state().snapshot())

        assert exc_info.value.retriable is True


class TestLoad:
    def test_round_trips_snapshot(self, tmp_path: Path) -> None:
        checkpointer = JsonFileCheckpointer(directory=tmp_path)
        snapshot = _state().snapshot()

        checkpointer.save("abc", snapshot)

        assert checkpointer.load("abc") == snapshot

    def test_missing_session_returns_none(self, tmp_path: Path) -> None:
        checkpointer = JsonFileCheckpointer(directory=tmp_path)

        assert checkpointer.load("never-saved") is None

    def test_corrupt_file_raises_read_error(self, tmp_path: Path) -> None:
        (tmp_path / "abc.json").write_text("{not json")
        checkpointer = JsonFileCheckpointer(directory=tmp_path)

        with pytest.raises(CheckpointReadError):
            checkpointer.load("abc")
