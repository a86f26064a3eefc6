"""Tests for ToolSchema construction and tool-name validation."""

import pytest

from codeloop.tools.domain.registry import ToolSchema, validate_tool_name
from tests.tools.fake_tools import PathInput


class TestToolSchemaFromInputModel:
    def test_parameter_schema_lists_model_fields(self) -> None:
        schema = ToolSchema.from_input_model(
            name="fake", description="d", input_model=PathInput
        )

        assert schema.parameter_schema["type"] == "object"
        assert "path" in schema.parameter_schema["properties"]  # type: ignore[operator]
        assert schema.parameter_schema["required"] == ["path"]

    def test_model_title_is_dropped(self) -> None:
        schema = ToolSchema.from_input_model(
            name="fake", description="d", input_model=PathInput
        )

        assert "title" not in schema.parameter_schema

    def test_defaults_to_side_effecting(self) -> None:
        schema = ToolSchema.from_input_model(
            name="fake", description="d", input_model=PathInput
        )

        assert schema.read_only is False
        assert schema.command_argument is None


class TestValidateToolName:
    @pytest.mark.parametrize("name", ["read_file", "web-fetch", "Tool2", "a" * 64])
    def test_valid_names(self, name: str) -> None:
        assert validate_tool_name(name) is None

    @pytest.mark.parametrize("name", ["", "has space", "dots.not.allowed", "semi;colon", "a" * 65])
    def test_invalid_names(self, name: str) -> None:
        assert validate_tool_name(name) is not None
