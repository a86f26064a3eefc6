"""run_shell_command tool — runs a validated command line without a shell."""

import asyncio
import contextlib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from codeloop.core.cancellation import run_cancellable
from codeloop.security.domain.command import escape_shell_argument, split_command
from codeloop.security.domain.path import resolve_within_root
from codeloop.tools.domain.errors import ToolExecutionError
from codeloop.tools.domain.registry import ToolOutput, ToolSchema
from codeloop.tools.domain.result import StructuredDisplay
from codeloop.tools.infrastructure.environment import secure_environment

_NAME = "run_shell_command"


class ShellCommandInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: str = Field(min_length=1, description="Command line to execute.")
    directory: str | None = Field(
        default=None,
        description="Absolute working directory. Defaults to the project root.",
    )


class ShellCommandTool:
    """Executes a command as an argv list with a sanitized environment.

    The command line has already passed command validation; it is split with
    POSIX rules and run directly, so shell metacharacters are never interpreted.
    A non-zero exit status is reported as a failed output carrying both streams.
    """

    input_model = ShellCommandInput

    def __init__(self, root_dir: Path, timeout_seconds: float) -> None:
        self._root_dir = root_dir
        self._timeout_seconds = timeout_seconds
        self.schema = ToolSchema.from_input_model(
            name=_NAME,
            description=(
                "Run a single command (no pipes, redirection or chaining) and"
                " return its exit code, stdout and stderr."
            ),
            input_model=ShellCommandInput,
            path_arguments=("directory",),
            command_argument="command",
        )

    def describe(self, arguments: ShellCommandInput) -> str:
        # Show the argv boundaries the process will actually receive.
        argv = split_command(arguments.command)
        shown = " ".join(map(escape_shell_argument, argv)) if argv else arguments.command
        where = arguments.directory or str(self._root_dir)
        return f"Run `{shown}` in {where}"

    async def execute(
        self, arguments: ShellCommandInput, cancel: asyncio.Event | None = None
    ) -> ToolOutput:
        argv = split_command(arguments.command)
        if not argv:
            raise ToolExecutionError(
                name=_NAME, reason="command has unbalanced quotes or is empty"
            )
        cwd = resolve_within_root(
            path=arguments.directory or self._root_dir, root=self._root_dir
        )

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                env=secure_environment(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ToolExecutionError(
                name=_NAME, reason=f"cannot start '{argv[0]}': {exc.strerror}"
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                run_cancellable(process.communicate(), cancel),
                timeout=self._timeout_seconds,
            )
        except TimeoutError as exc:
            await _terminate(process)
            raise ToolExecutionError(
                name=_NAME,
                reason=f"command timed out after {self._timeout_seconds:g} seconds",
            ) from exc
        except BaseException:
            await _terminate(process)
            raise

        return _to_output(
            command=arguments.command,
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )


def _to_output(command: str, exit_code: int, stdout: str, stderr: str) -> ToolOutput:
    llm_content = (
        f"Command: {command}\n"
        f"Exit code: {exit_code}\n"
        f"Stdout: {stdout or '(empty)'}\n"
        f"Stderr: {stderr or '(empty)'}"
    )
    return ToolOutput(
        llm_content=llm_content,
        display=StructuredDisplay(
            data={
                "command": command,
                "exit_code": exit_code,
                "stdout": stdout,
                "stderr": stderr,
            }
        ),
        is_error=exit_code != 0,
    )


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    with contextlib.suppress(ProcessLookupError):
        process.kill()
    await process.wait()
