"""${ENV_VAR} and ${ENV_VAR:-default} substitution over parsed YAML data."""

import os
import re

# Group 1 is the variable name; group 2, when present, is the default text.
_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(data: RawValue) -> list[str]:
    """Return every referenced variable that is unset and has no default.

    The whole tree is walked so that all problems are reported in one error.
    """
    missing: list[str] = []
    for text in _strings(data):
        for match in _REFERENCE.finditer(text):
            name, default = match.group(1), match.group(2)
            if default is None and name not in os.environ and name not in missing:
                missing.append(name)
    return missing


def interpolate(data: RawValue) -> RawValue:
    """Return a copy of data with every reference replaced by its value.

    Callers check `collect_missing_vars` first; an unset variable without a
    default raises KeyError here.
    """
    if isinstance(data, str):
        return _REFERENCE.sub(_substitute, data)
    if isinstance(data, list):
        return [interpolate(item) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value) for key, value in data.items()}
    return data


def _substitute(match: re.Match[str]) -> str:
    name, default = match.group(1), match.group(2)
    if default is not None:
        return os.environ.get(name, default)
    return os.environ[name]


def _strings(data: RawValue) -> list[str]:
    if isinstance(data, str):
        return [data]
    if isinstance(data, list):
        return [text for item in data for text in _strings(item)]
    if isinstance(data, dict):
        return [text for value in data.values() for text in _strings(value)]
    return []
