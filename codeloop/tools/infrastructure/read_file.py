"""read_file tool — returns the text of a file inside the root directory."""

import asyncio
import os
import stat
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from codeloop.security.domain.path import resolve_within_root
from codeloop.tools.domain.errors import ToolExecutionError
from codeloop.tools.domain.registry import ToolOutput, ToolSchema
from codeloop.tools.domain.result import TextDisplay

_NAME = "read_file"


class ReadFileInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(description="Absolute path of the file to read.")
    offset: int | None = Field(
        default=None, ge=0, description="Zero-based line to start reading from."
    )
    limit: int | None = Field(
        default=None, ge=1, description="Maximum number of lines to return."
    )


class ReadFileTool:
    """Reads a UTF-8 text file, optionally a window of its lines."""

    input_model = ReadFileInput

    def __init__(self, root_dir: Path, max_bytes: int) -> None:
        self._root_dir = root_dir
        self._max_bytes = max_bytes
        self.schema = ToolSchema.from_input_model(
            name=_NAME,
            description=(
                "Read a text file. Use offset and limit to read part of a large file."
            ),
            input_model=ReadFileInput,
            read_only=True,
            path_arguments=("path",),
        )

    def describe(self, arguments: ReadFileInput) -> str:
        return f"Read {arguments.path}"

    async def execute(
        self, arguments: ReadFileInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        real_path = resolve_within_root(path=arguments.path, root=self._root_dir)
        text = await asyncio.to_thread(self._read, real_path)

        lines = text.splitlines(keepends=True)
        start = arguments.offset or 0
        end = start + arguments.limit if arguments.limit is not None else len(lines)
        selected = lines[start:end]

        if start or end < len(lines):
            summary = (
                f"Read lines {start + 1}-{start + len(selected)} of {len(lines)}"
                f" from {arguments.path}"
            )
        else:
            summary = f"Read {len(lines)} lines from {arguments.path}"

        return ToolOutput(llm_content="".join(selected), display=TextDisplay(text=summary))

    def _read(self, real_path: Path) -> str:
        # O_NOFOLLOW refuses a symlink swapped in after the path was resolved.
        try:
            fd = os.open(real_path, os.O_RDONLY | os.O_NOFOLLOW)
        except FileNotFoundError as exc:
            raise ToolExecutionError(name=_NAME, reason=f"file not found: {real_path}") from exc
        except OSError as exc:
            raise ToolExecutionError(name=_NAME, reason=f"cannot open {real_path}: {exc.strerror}") from exc

        try:
            info = os.fstat(fd)
            if stat.S_ISDIR(info.st_mode):
                raise ToolExecutionError(name=_NAME, reason=f"{real_path} is a directory")
            if not stat.S_ISREG(info.st_mode):
                raise ToolExecutionError(name=_NAME, reason=f"{real_path} is not a regular file")
            if info.st_size > self._max_bytes:
                raise ToolExecutionError(
                    name=_NAME,
                    reason=f"{real_path} is {info.st_size} bytes, limit is {self._max_bytes}",
                )
            with os.fdopen(fd, "rb", closefd=False) as fh:
                data = fh.read()
        finally:
            os.close(fd)

        return data.decode("utf-8", errors="replace")
