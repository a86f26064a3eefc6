"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from codeloop.config.domain.config import AgentConfig
from codeloop.config.domain.observer import ConfigObserver
from codeloop.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from codeloop.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)

_TEMPERATURE_WARNING_THRESHOLD = 1.0


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns an AgentConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> AgentConfig:
        """
        Load, interpolate, validate, and return an AgentConfig from a YAML file.

        Relative `tools.root_dir` and `session.checkpoint_dir` values are
        resolved against the directory containing the config file.

        Raises:
            ConfigLoadError: if the file does not exist, cannot be read, or is
                not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        interpolated = interpolate(raw)
        cfg = _build_config(resolved=interpolated, base_dir=path.parent)
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(
            path=str(path), model=cfg.backend.model, root_dir=str(cfg.tools.root_dir)
        )
        return cfg


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigLoadError(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigLoadError(path, reason=exc.strerror or str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path, reason=f"invalid YAML: {exc}") from exc


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_config(resolved: Any, base_dir: Path) -> AgentConfig:
    if not isinstance(resolved, dict):
        raise ConfigValidationError("top-level YAML value must be a mapping")
    try:
        cfg = AgentConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
    return _anchor_paths(cfg=cfg, base_dir=base_dir)


def _anchor_paths(cfg: AgentConfig, base_dir: Path) -> AgentConfig:
    tools = cfg.tools
    if not tools.root_dir.is_absolute():
        tools = tools.model_copy(update={"root_dir": (base_dir / tools.root_dir).resolve()})

    session = cfg.session
    checkpoint_dir = session.checkpoint_dir
    if checkpoint_dir is not None and not checkpoint_dir.is_absolute():
        session = session.model_copy(
            update={"checkpoint_dir": (base_dir / checkpoint_dir).resolve()}
        )

    return cfg.model_copy(update={"tools": tools, "session": session})


def _emit_warnings(cfg: AgentConfig, observer: ConfigObserver) -> None:
    if cfg.backend.temperature > _TEMPERATURE_WARNING_THRESHOLD:
        observer.config_temperature_warning(cfg.backend.temperature)
