"""Composition of the built-in tool set from a ToolsConfig."""

from codeloop.config.domain.config import ToolsConfig
from codeloop.tools.infrastructure.list_directory import ListDirectoryTool
from codeloop.tools.infrastructure.read_file import ReadFileTool
from codeloop.tools.infrastructure.registry import InMemoryToolRegistry
from codeloop.tools.infrastructure.shell import ShellCommandTool
from codeloop.tools.infrastructure.web_fetch import WebFetchTool
from codeloop.tools.infrastructure.write_file import WriteFileTool


def create_builtin_registry(config: ToolsConfig) -> InMemoryToolRegistry:
    """Return a registry holding every built-in tool, confined to config.root_dir."""
    root_dir = config.root_dir
    return InMemoryToolRegistry(
        tools=[
            ReadFileTool(root_dir=root_dir, max_bytes=config.max_read_bytes),
            WriteFileTool(root_dir=root_dir),
            ListDirectoryTool(root_dir=root_dir),
            ShellCommandTool(
                root_dir=root_dir, timeout_seconds=config.shell_timeout_seconds
            ),
            WebFetchTool(
                timeout_seconds=config.web_fetch_timeout_seconds,
                max_chars=config.max_read_bytes,
                allow_private_hosts=config.allow_private_hosts,
            ),
        ]
    )
