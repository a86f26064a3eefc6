"""write_file tool — writes or appends text to a file inside the root directory."""

import asyncio
import difflib
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from codeloop.security.domain.path import resolve_within_root
from codeloop.tools.domain.errors import ToolExecutionError
from codeloop.tools.domain.registry import ToolOutput, ToolSchema
from codeloop.tools.domain.result import DiffDisplay

_NAME = "write_file"


class WriteFileInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(description="Absolute path of the file to write.")
    content: str = Field(description="Text to write.")
    overwrite: bool = Field(
        default=False,
        description="Replace the file instead of appending to it.",
    )


class WriteFileTool:
    """Appends to a file, or replaces it atomically when overwrite is set.

    Missing parent directories are created. The display payload is a unified
    diff of the change.
    """

    input_model = WriteFileInput

    def __init__(self, root_dir: Path) -> None:
        self._root_dir = root_dir
        self.schema = ToolSchema.from_input_model(
            name=_NAME,
            description=(
                "Write text to a file. Appends by default; set overwrite to replace"
                " the whole file."
            ),
            input_model=WriteFileInput,
            path_arguments=("path",),
        )

    def describe(self, arguments: WriteFileInput) -> str:
        real_path = resolve_within_root(path=arguments.path, root=self._root_dir)
        before = _read_existing(real_path)
        after = _proposed(before=before, arguments=arguments)
        diff = _unified_diff(path=arguments.path, before=before, after=after)
        action = "Overwrite" if arguments.overwrite else "Append to"
        return f"{action} {arguments.path}\n{diff}" if diff else f"{action} {arguments.path} (no changes)"

    async def execute(
        self, arguments: WriteFileInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        real_path = resolve_within_root(path=arguments.path, root=self._root_dir)
        before, after = await asyncio.to_thread(self._write, real_path, arguments)

        diff = _unified_diff(path=arguments.path, before=before, after=after)
        verb = "overwrote" if arguments.overwrite else "appended to"
        return ToolOutput(
            llm_content=f"Successfully {verb} file: {arguments.path}",
            display=DiffDisplay(file_path=arguments.path, diff=diff),
        )

    def _write(self, real_path: Path, arguments: WriteFileInput) -> tuple[str, str]:
        if real_path.is_dir():
            raise ToolExecutionError(name=_NAME, reason=f"{real_path} is a directory")

        before = _read_existing(real_path)
        try:
            real_path.parent.mkdir(parents=True, exist_ok=True)
            if arguments.overwrite:
                _atomic_write(real_path, arguments.content)
            else:
                with real_path.open("a", encoding="utf-8") as fh:
                    fh.write(arguments.content)
        except OSError as exc:
            raise ToolExecutionError(
                name=_NAME, reason=f"cannot write {real_path}: {exc.strerror}"
            ) from exc

        return before, _proposed(before=before, arguments=arguments)


def _read_existing(path: Path) -> str:
    if not path.is_file():
        return ""
    return path.read_text(encoding="utf-8", errors="replace")


def _proposed(before: str, arguments: WriteFileInput) -> str:
    return arguments.content if arguments.overwrite else before + arguments.content


def _unified_diff(path: str, before: str, after: str) -> str:
    return "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{path.lstrip('/')}",
            tofile=f"b/{path.lstrip('/')}",
        )
    )


def _atomic_write(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
