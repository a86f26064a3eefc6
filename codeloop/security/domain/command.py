"""Shell command validation — rejects command lines that could chain or inject commands.

All functions are pure. Quoted sections are found by a left-to-right scan that
follows POSIX quoting: outside quotes a backslash escapes the next character,
single quotes admit no escapes, and double quotes admit escaped quotes and
backslashes. Only spans the scan actually closes are masked out for the
operators that are harmless inside quotes. Operators that a shell still
interprets inside double quotes (command substitution, parameter expansion)
and newlines are checked against the raw command.
"""

import re
import shlex
from dataclasses import dataclass


@dataclass(frozen=True)
class _DangerousPattern:
    pattern: re.Pattern[str]
    description: str
    allowed_in_quotes: bool


_DANGEROUS_PATTERNS: tuple[_DangerousPattern, ...] = (
    _DangerousPattern(
        pattern=re.compile(r"&&|\|\|"),
        description="logical operators (&&, ||) that could conditionally execute commands",
        allowed_in_quotes=True,
    ),
    _DangerousPattern(
        pattern=re.compile(r"[;&|]"),
        description="command chaining characters (;, &, |) that could execute multiple commands",
        allowed_in_quotes=True,
    ),
    _DangerousPattern(
        pattern=re.compile(r"[<>]"),
        description="redirection operators (<, >) that could access unauthorized files",
        allowed_in_quotes=True,
    ),
    _DangerousPattern(
        pattern=re.compile(r"\$\("),
        description="command substitution $() that could execute nested commands",
        allowed_in_quotes=False,
    ),
    _DangerousPattern(
        pattern=re.compile(r"`"),
        description="backticks (`) that could execute nested commands",
        allowed_in_quotes=False,
    ),
    _DangerousPattern(
        pattern=re.compile(r"\$\{[^}]*[:|?+=-]"),
        description="parameter expansion with operators that could execute code",
        allowed_in_quotes=False,
    ),
    _DangerousPattern(
        pattern=re.compile(r"[\n\r]"),
        description="newline characters that could inject new commands",
        allowed_in_quotes=False,
    ),
)

_DENIED_BASE_COMMANDS = frozenset({"eval", "exec", "source", "."})


def validate_command(command: str) -> str | None:
    """Return None if the command is safe to run, otherwise a human-readable reason."""
    trimmed = command.strip()
    if not trimmed:
        return "Command cannot be empty"

    masked = _mask_quoted_spans(trimmed)
    for dangerous in _DANGEROUS_PATTERNS:
        subject = masked if dangerous.allowed_in_quotes else trimmed
        if dangerous.pattern.search(subject):
            return f"Potentially dangerous command: {dangerous.description}"

    base = command_root(trimmed)
    if base is not None and base.lower() in _DENIED_BASE_COMMANDS:
        return f"Potentially dangerous command: {base} can execute arbitrary code"

    return None


def split_command(command: str) -> list[str] | None:
    """Split a command line into argv using POSIX rules.

    Returns None when the command cannot be split safely (unbalanced quotes or a
    dangling escape).
    """
    try:
        return shlex.split(command, posix=True)
    except ValueError:
        return None


def command_root(command: str) -> str | None:
    """Return the executable name of a command line, with quotes removed."""
    argv = split_command(command)
    if argv:
        return argv[0]
    parts = command.split()
    if not parts:
        return None
    return parts[0].strip("'\"")


def escape_shell_argument(arg: str) -> str:
    """Quote a single argument so a POSIX shell reads it back verbatim."""
    return shlex.quote(arg)


def _mask_quoted_spans(command: str) -> str:
    """Replace every closed quoted span and escaped character with placeholders.

    An unterminated quote leaves the rest of the command unmasked.
    """
    masked: list[str] = []
    index = 0
    length = len(command)
    while index < length:
        char = command[index]
        if char == "\\":
            masked.append("Q" * len(command[index : index + 2]))
            index += 2
            continue
        if char in "'\"":
            end = _closing_quote(command, index)
            if end is None:
                masked.append(command[index:])
                break
            masked.append("Q" * (end - index + 1))
            index = end + 1
            continue
        masked.append(char)
        index += 1
    return "".join(masked)


def _closing_quote(command: str, start: int) -> int | None:
    quote = command[start]
    index = start + 1
    while index < len(command):
        char = command[index]
        if char == quote:
            return index
        if quote == '"' and char == "\\" and command[index + 1 : index + 2] in ('"', "\\"):
            index += 2
            continue
        index += 1
    return None
