"""Tests for the write_file tool."""

from pathlib import Path

from codeloop.tools.domain.result import DiffDisplay
from codeloop.tools.infrastructure.write_file import WriteFileInput, WriteFileTool


class TestWriteFile:
    async def test_creates_file_and_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "pkg" / "mod.py"

        output = await WriteFileTool(root_dir=tmp_path).execute(
            WriteFileInput(path=str(target), content="x = 1\n")
        )

        assert target.read_text() == "x = 1\n"
        assert isinstance(output.display, DiffDisplay)
        assert "+x = 1" in output.display.diff

    async def test_appends_by_default(self, tmp_path: Path) -> None:
        target = tmp_path / "log.txt"
        target.write_text("first\n")

        output = await WriteFileTool(root_dir=tmp_path).execute(
            WriteFileInput(path=str(target), content="second\n")
        )

        assert target.read_text() == "first\nsecond\n"
        assert "appended" in output.llm_content

    async def test_overwrite_replaces_content(self, tmp_path: Path) -> None:
        target = tmp_path / "conf.ini"
        target.write_text("old\n")

        output = await WriteFileTool(root_dir=tmp_path).execute(
            WriteFileInput(path=str(target), content="new\n", overwrite=True)
        )

        assert target.read_text() == "new\n"
        assert isinstance(output.display, DiffDisplay)
        assert "-old" in output.display.diff
        assert "+new" in output.display.diff
        assert [p.name for p in tmp_path.iterdir()] == ["conf.ini"]


class TestDescribe:
    def test_describe_shows_diff_without_writing(self, tmp_path: Path) -> None:
        target = tmp_path / "a.txt"
        target.write_text("keep\n")
        tool = WriteFileTool(root_dir=tmp_path)

        detail = tool.describe(WriteFileInput(path=str(target), content="added\n"))

        assert detail.startswith(f"Append to {target}")
        assert "+added" in detail
        assert target.read_text() == "keep\n"

    def test_is_not_read_only(self, tmp_path: Path) -> None:
        assert WriteFileTool(root_dir=tmp_path).schema.read_only is False
