"""list_directory tool — lists the entries of a directory inside the root."""

import asyncio
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from codeloop.security.domain.path import resolve_within_root
from codeloop.tools.domain.errors import ToolExecutionError
from codeloop.tools.domain.registry import ToolOutput, ToolSchema
from codeloop.tools.domain.result import StructuredDisplay

_NAME = "list_directory"


class ListDirectoryInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(description="Absolute path of the directory to list.")


class ListDirectoryTool:
    input_model = ListDirectoryInput

    def __init__(self, root_dir: Path) -> None:
        self._root_dir = root_dir
        self.schema = ToolSchema.from_input_model(
            name=_NAME,
            description="List files and subdirectories. Directories end with '/'.",
            input_model=ListDirectoryInput,
            read_only=True,
            path_arguments=("path",),
        )

    def describe(self, arguments: ListDirectoryInput) -> str:
        return f"List {arguments.path}"

    async def execute(
        self, arguments: ListDirectoryInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        real_path = resolve_within_root(path=arguments.path, root=self._root_dir)
        entries = await asyncio.to_thread(_list_entries, real_path)

        listing = "\n".join(entries) if entries else "(empty directory)"
        return ToolOutput(
            llm_content=f"Directory listing for {arguments.path}:\n{listing}",
            display=StructuredDisplay(data={"path": arguments.path, "entries": entries}),
        )


def _list_entries(path: Path) -> list[str]:
    if not path.exists():
        raise ToolExecutionError(name=_NAME, reason=f"directory not found: {path}")
    if not path.is_dir():
        raise ToolExecutionError(name=_NAME, reason=f"{path} is not a directory")
    # Directories first, then files, each alphabetically.
    children = sorted(path.iterdir(), key=lambda child: (not child.is_dir(), child.name))
    return [f"{child.name}/" if child.is_dir() else child.name for child in children]
