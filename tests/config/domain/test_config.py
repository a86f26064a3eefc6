"""Tests for the AgentConfig aggregate and its sections."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from codeloop.config.domain.config import (
    AgentConfig,
    BackendConfig,
    ResilienceConfig,
    ToolsConfig,
)


class TestDefaults:
    def test_default_builds_minimal_config(self) -> None:
        cfg = AgentConfig.default(root_dir=Path("/work"))

        assert cfg.backend.model == "gpt-4o-mini"
        assert cfg.backend.fallback_model is None
        assert cfg.tools.root_dir == Path("/work")
        assert cfg.resilience.failure_threshold == 3
        assert cfg.resilience.fallback_auth_types == []
        assert cfg.session.max_rounds == 25
        assert cfg.session.checkpoint_dir is None

    def test_tools_defaults(self) -> None:
        tools = ToolsConfig(root_dir=Path("/work"))

        assert tools.allow_private_hosts is False
        assert tools.max_read_bytes == 1_048_576


class TestValidation:
    def test_empty_model_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BackendConfig(model="")

    @pytest.mark.parametrize("temperature", [-0.1, 2.1])
    def test_temperature_out_of_range_is_rejected(self, temperature: float) -> None:
        with pytest.raises(ValidationError):
            BackendConfig(model="m", temperature=temperature)

    def test_failure_threshold_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ResilienceConfig(failure_threshold=0)

    def test_config_is_frozen(self) -> None:
        cfg = AgentConfig.default(root_dir=Path("/work"))

        with pytest.raises(ValidationError):
            cfg.backend.model = "other"  # type: ignore[misc]


class TestOverrides:
    def test_none_keeps_values(self) -> None:
        cfg = AgentConfig.default(root_dir=Path("/work"), model="m1")

        assert cfg.with_overrides() == cfg

    def test_overrides_model_fallback_and_root(self) -> None:
        cfg = AgentConfig.default(root_dir=Path("/work"), model="m1")

        updated = cfg.with_overrides(
            root_dir=Path("/other"), model="m2", fallback_model="m3"
        )

        assert updated.backend.model == "m2"
        assert updated.backend.fallback_model == "m3"
        assert updated.tools.root_dir == Path("/other")
        assert cfg.backend.model == "m1"
