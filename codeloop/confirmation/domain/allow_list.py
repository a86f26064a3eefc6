"""Session-scoped allow-list built from proceed_always decisions."""

from codeloop.security.domain.command import command_root
from codeloop.tools.domain.registry import ToolSchema

# (tool name, command root); the root is None for tools without a command argument.
type AllowKey = tuple[str, str | None]


class AllowList:
    """Remembers which calls the user approved for the rest of the session.

    Command tools are keyed by tool name plus the executable of the command
    line, so choosing "always" for `git status` also covers `git diff` but never
    `rm`.
    """

    def __init__(self) -> None:
        self._keys: set[AllowKey] = set()

    def key_for(self, schema: ToolSchema, arguments: dict[str, object]) -> AllowKey:
        if schema.command_argument is None:
            return (schema.name, None)
        command = arguments.get(schema.command_argument)
        root = command_root(command) if isinstance(command, str) else None
        return (schema.name, root)

    def grant(self, key: AllowKey) -> None:
        self._keys.add(key)

    def covers(self, key: AllowKey) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)
