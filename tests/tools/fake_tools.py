"""Hand-written Tool implementations for registry, invoker and engine tests."""

import asyncio

from pydantic import BaseModel, ConfigDict

from codeloop.tools.domain.errors import ToolExecutionError
from codeloop.tools.domain.registry import ToolOutput, ToolSchema
from codeloop.tools.domain.result import TextDisplay


class PathInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str


class CommandInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: str


class TextInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str = ""


class FakePathTool:
    """Reads nothing; records the paths it was executed with.

    Paths listed in fail_paths raise ToolExecutionError.
    """

    input_model = PathInput

    def __init__(
        self,
        name: str = "fake_read",
        read_only: bool = True,
        fail_paths: frozenset[str] = frozenset(),
    ) -> None:
        self.schema = ToolSchema.from_input_model(
            name=name,
            description="Fake path tool.",
            input_model=PathInput,
            read_only=read_only,
            path_arguments=("path",),
        )
        self.fail_paths = fail_paths
        self.executed: list[str] = []

    def describe(self, arguments: PathInput) -> str:
        return f"touch {arguments.path}"

    async def execute(
        self, arguments: PathInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        self.executed.append(arguments.path)
        if arguments.path in self.fail_paths:
            raise ToolExecutionError(name=self.schema.name, reason=f"cannot read {arguments.path}")
        return ToolOutput(
            llm_content=f"contents of {arguments.path}",
            display=TextDisplay(text=f"read {arguments.path}"),
        )


class FakeCommandTool:
    """Side-effecting command tool that records the commands it ran."""

    input_model = CommandInput

    def __init__(self, name: str = "fake_shell", exit_code: int = 0) -> None:
        self.schema = ToolSchema.from_input_model(
            name=name,
            description="Fake shell tool.",
            input_model=CommandInput,
            command_argument="command",
        )
        self.exit_code = exit_code
        self.executed: list[str] = []

    def describe(self, arguments: CommandInput) -> str:
        return f"Run `{arguments.command}`"

    async def execute(
        self, arguments: CommandInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        self.executed.append(arguments.command)
        return ToolOutput(
            llm_content=f"ran {arguments.command}",
            display=TextDisplay(text=arguments.command),
            is_error=self.exit_code != 0,
        )


class BlockingTool:
    """Waits until released, so tests can cancel while a tool is running."""

    input_model = TextInput

    def __init__(self, name: str = "blocking") -> None:
        self.schema = ToolSchema.from_input_model(
            name=name,
            description="Blocks until released.",
            input_model=TextInput,
            read_only=True,
        )
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.was_cancelled = False

    def describe(self, arguments: TextInput) -> str:
        return "block"

    async def execute(
        self, arguments: TextInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        self.started.set()
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.was_cancelled = True
            raise
        return ToolOutput(llm_content="released", display=TextDisplay(text="released"))


class CrashingTool:
    """Raises an unexpected (non-codeloop) exception."""

    input_model = TextInput

    def __init__(self, name: str = "crashing") -> None:
        self.schema = ToolSchema.from_input_model(
            name=name, description="Always crashes.", input_model=TextInput, read_only=True
        )

    def describe(self, arguments: TextInput) -> str:
        return "crash"

    async def execute(
        self, arguments: TextInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        raise RuntimeError("boom")
