"""Tool and ToolRegistry ports, plus the ToolSchema and ToolOutput value objects."""

import asyncio
import re
from typing import Protocol

from pydantic import BaseModel

from codeloop.tools.domain.result import DiffDisplay, StructuredDisplay, TextDisplay

_TOOL_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_TOOL_NAME_MAX_LENGTH = 64


class ToolSchema(BaseModel, frozen=True):
    """Declared shape of a tool as advertised to the backend.

    path_arguments names the arguments the invoker must confine to the root
    directory; command_argument names the argument holding a shell command line.
    Read-only tools never require user confirmation.
    """

    name: str
    description: str
    parameter_schema: dict[str, object]
    read_only: bool = False
    path_arguments: tuple[str, ...] = ()
    command_argument: str | None = None

    @classmethod
    def from_input_model(
        cls,
        name: str,
        description: str,
        input_model: type[BaseModel],
        read_only: bool = False,
        path_arguments: tuple[str, ...] = (),
        command_argument: str | None = None,
    ) -> "ToolSchema":
        schema = input_model.model_json_schema()
        schema.pop("title", None)
        return cls(
            name=name,
            description=description,
            parameter_schema=schema,
            read_only=read_only,
            path_arguments=path_arguments,
            command_argument=command_argument,
        )


class ToolOutput(BaseModel, frozen=True):
    """Raw output of a tool before it is wrapped into a ToolCallResult.

    is_error marks a tool that ran to completion but reports failure, such as a
    shell command exiting non-zero.
    """

    llm_content: str
    display: TextDisplay | DiffDisplay | StructuredDisplay
    is_error: bool = False


class Tool[InputT: BaseModel](Protocol):
    """A single executable tool whose arguments are validated into InputT."""

    schema: ToolSchema
    input_model: type[InputT]

    def describe(self, arguments: InputT) -> str:
        """Return a human-readable summary of what the call would do."""
        ...

    async def execute(
        self, arguments: InputT, cancel: asyncio.Event | None = None
    ) -> ToolOutput: ...


class ToolRegistry(Protocol):
    """Source of tool schemas and executor of validated tool calls."""

    def list_schemas(self) -> list[ToolSchema]: ...

    def get_schema(self, name: str) -> ToolSchema | None: ...

    def parse_arguments(self, name: str, arguments: dict[str, object]) -> BaseModel:
        """Validate raw arguments against the tool's input model.

        Raises:
            UnknownToolError: if no tool is registered under name.
            pydantic.ValidationError: if the arguments do not match.
        """
        ...

    def describe(self, name: str, arguments: dict[str, object]) -> str: ...

    async def execute(
        self, name: str, arguments: BaseModel, cancel: asyncio.Event | None = None
    ) -> ToolOutput: ...


def validate_tool_name(name: str) -> str | None:
    """Return None if name is a valid tool name, otherwise the reason it is not."""
    if not name:
        return "tool name cannot be empty"
    if len(name) > _TOOL_NAME_MAX_LENGTH:
        return f"tool name exceeds {_TOOL_NAME_MAX_LENGTH} characters"
    if not _TOOL_NAME_PATTERN.match(name):
        return "tool name may only contain letters, digits, underscores and hyphens"
    return None
