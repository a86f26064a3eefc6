"""CLI entrypoint for codeloop — typer app with `run` and `chat` commands."""

import asyncio
import contextlib
import signal
import sys
from collections.abc import Iterator
from pathlib import Path

import typer
from rich.console import Console

from codeloop.backend.domain.fallback import FallbackHandler
from codeloop.cli.fallback import ConsoleFallbackHandler
from codeloop.cli.log_config import configure_structlog
from codeloop.cli.render import EventRenderer
from codeloop.config.domain.config import AgentConfig
from codeloop.config.infrastructure.observer import StructlogConfigObserver
from codeloop.config.infrastructure.yaml_loader import YamlConfigLoader
from codeloop.confirmation.domain.provider import ApprovalProvider
from codeloop.confirmation.infrastructure.console_provider import (
    AutoApprovalProvider,
    ConsoleApprovalProvider,
)
from codeloop.core.errors import CodeloopError
from codeloop.session.application.turn_engine import TurnEngine
from codeloop.session.domain.events import ErrorEvent
from codeloop.session.infrastructure.factory import create_turn_engine

app = typer.Typer(add_completion=False)

_EXIT_WORDS = frozenset({"exit", "quit", ":q"})

ConfigOption = typer.Option(None, "--config", "-c", help="Path to agent config YAML")
RootOption = typer.Option(
    None, "--root", "-r", help="Project root the tools are confined to"
)
ModelOption = typer.Option(None, "--model", "-m", help="Primary model name")
FallbackOption = typer.Option(
    None, "--fallback-model", help="Model used while the primary is rate limited"
)
YesOption = typer.Option(
    False, "--yes", "-y", help="Approve every tool call without asking"
)
SessionOption = typer.Option(
    None, "--session-id", help="Resume (and checkpoint) this session id"
)
LogFormatOption = typer.Option(
    "console", "--log-format", help="Log format: 'console' or 'json'"
)
LogLevelOption = typer.Option(
    "warning", "--log-level", help="Minimum log level: debug, info, warning, error"
)


def _load_config(
    config_path: Path | None,
    root: Path | None,
    model: str | None,
    fallback_model: str | None,
) -> AgentConfig:
    if config_path is not None:
        config = YamlConfigLoader(observer=StructlogConfigObserver()).load(path=config_path)
    else:
        config = AgentConfig.default(root_dir=(root or Path.cwd()).resolve())
    return config.with_overrides(
        root_dir=root.resolve() if root is not None else None,
        model=model,
        fallback_model=fallback_model,
    )


def _build_engine(
    config: AgentConfig, yes: bool, session_id: str | None
) -> TurnEngine:
    approval_provider: ApprovalProvider
    fallback_handler: FallbackHandler | None
    if yes:
        approval_provider = AutoApprovalProvider()
        fallback_handler = None
    else:
        approval_provider = ConsoleApprovalProvider()
        fallback_handler = ConsoleFallbackHandler()
    return create_turn_engine(
        config=config,
        approval_provider=approval_provider,
        fallback_handler=fallback_handler,
        session_id=session_id,
    )


@contextlib.contextmanager
def _cancel_on_sigint(cancel: asyncio.Event) -> Iterator[None]:
    """Route Ctrl-C to the turn's cancellation signal while the turn runs."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    except NotImplementedError:
        # No loop signal handlers on this platform; Ctrl-C raises KeyboardInterrupt.
        yield
        return
    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGINT)


async def _drive_turn(engine: TurnEngine, prompt: str, renderer: EventRenderer) -> bool:
    """Run one turn, rendering events; return False if it ended with an error."""
    cancel = asyncio.Event()
    succeeded = True
    with _cancel_on_sigint(cancel):
        async for event in engine.run_turn(prompt=prompt, cancel=cancel):
            renderer.render(event)
            if isinstance(event, ErrorEvent):
                succeeded = False
    return succeeded


async def _chat_loop(engine: TurnEngine, console: Console, renderer: EventRenderer) -> None:
    console.print(
        f"[dim]codeloop session {engine.session_id}. Type 'exit' or press Ctrl-D to quit.[/]"
    )
    while True:
        try:
            prompt = await asyncio.to_thread(console.input, "[bold green]> [/]")
        except EOFError:
            console.print()
            return
        if not prompt.strip():
            continue
        if prompt.strip().lower() in _EXIT_WORDS:
            return
        await _drive_turn(engine=engine, prompt=prompt, renderer=renderer)


@app.command()
def run(
    prompt: str = typer.Argument(..., help="Instruction for the agent"),
    config_path: Path | None = ConfigOption,
    root: Path | None = RootOption,
    model: str | None = ModelOption,
    fallback_model: str | None = FallbackOption,
    yes: bool = YesOption,
    session_id: str | None = SessionOption,
    log_format: str = LogFormatOption,
    log_level: str = LogLevelOption,
) -> None:
    """Run a single agent turn for PROMPT and exit."""
    configure_structlog(log_format=log_format, log_level=log_level)
    try:
        config = _load_config(
            config_path=config_path, root=root, model=model, fallback_model=fallback_model
        )
        engine = _build_engine(config=config, yes=yes, session_id=session_id)
        renderer = EventRenderer(console=Console())
        succeeded = asyncio.run(_drive_turn(engine=engine, prompt=prompt, renderer=renderer))
    except KeyboardInterrupt:
        typer.echo("Interrupted.")
        sys.exit(130)
    except CodeloopError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)

    if not succeeded:
        sys.exit(1)


@app.command()
def chat(
    config_path: Path | None = ConfigOption,
    root: Path | None = RootOption,
    model: str | None = ModelOption,
    fallback_model: str | None = FallbackOption,
    yes: bool = YesOption,
    session_id: str | None = SessionOption,
    log_format: str = LogFormatOption,
    log_level: str = LogLevelOption,
) -> None:
    """Start an interactive session; every prompt is one turn of the same conversation."""
    configure_structlog(log_format=log_format, log_level=log_level)
    try:
        config = _load_config(
            config_path=config_path, root=root, model=model, fallback_model=fallback_model
        )
        engine = _build_engine(config=config, yes=yes, session_id=session_id)
        console = Console()
        asyncio.run(
            _chat_loop(engine=engine, console=console, renderer=EventRenderer(console=console))
        )
    except KeyboardInterrupt:
        typer.echo("Interrupted.")
        sys.exit(130)
    except CodeloopError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


if __name__ == "__main__":
    app()
