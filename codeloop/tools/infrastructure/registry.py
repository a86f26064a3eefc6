"""InMemoryToolRegistry — holds Tool implementations keyed by name."""

import asyncio
from typing import Any

from pydantic import BaseModel

from codeloop.tools.domain.errors import ToolRegistrationError, UnknownToolError
from codeloop.tools.domain.registry import (
    Tool,
    ToolOutput,
    ToolSchema,
    validate_tool_name,
)


class InMemoryToolRegistry:
    """Registry backed by a dict; satisfies the ToolRegistry protocol structurally."""

    def __init__(self, tools: list[Tool[Any]] | None = None) -> None:
        self._tools: dict[str, Tool[Any]] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool[Any]) -> None:
        """Add tool to the registry.

        Raises:
            ToolRegistrationError: if the name is invalid or already taken.
        """
        name = tool.schema.name
        reason = validate_tool_name(name)
        if reason is not None:
            raise ToolRegistrationError(name=name, reason=reason)
        if name in self._tools:
            raise ToolRegistrationError(name=name, reason="name already registered")
        self._tools[name] = tool

    def list_schemas(self) -> list[ToolSchema]:
        return [tool.schema for tool in self._tools.values()]

    def get_schema(self, name: str) -> ToolSchema | None:
        tool = self._tools.get(name)
        return tool.schema if tool is not None else None

    def parse_arguments(self, name: str, arguments: dict[str, object]) -> BaseModel:
        return self._get(name).input_model.model_validate(arguments)

    def describe(self, name: str, arguments: dict[str, object]) -> str:
        tool = self._get(name)
        return tool.describe(tool.input_model.model_validate(arguments))

    async def execute(
        self, name: str, arguments: BaseModel, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        return await self._get(name).execute(arguments, cancel)

    def _get(self, name: str) -> Tool[Any]:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name=name)
        return tool
