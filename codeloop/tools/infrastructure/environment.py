"""Sanitized environment for child processes started by tools."""

import os

# Variables that let a caller inject code into any process that inherits them.
_DANGEROUS_VARIABLES = frozenset(
    {
        "LD_PRELOAD",
        "LD_LIBRARY_PATH",
        "LD_AUDIT",
        "DYLD_INSERT_LIBRARIES",
        "DYLD_LIBRARY_PATH",
        "NODE_OPTIONS",
        "ELECTRON_RUN_AS_NODE",
        "BASH_ENV",
        "ENV",
        "PROMPT_COMMAND",
    }
)


def secure_environment(base: dict[str, str] | None = None) -> dict[str, str]:
    """Return a copy of base (default: os.environ) without injection variables."""
    source = os.environ if base is None else base
    return {
        key: value
        for key, value in source.items()
        if key not in _DANGEROUS_VARIABLES and not key.startswith("BASH_FUNC_")
    }
