"""Tests for ToolCallResult factories and the DisplayPayload union."""

from pydantic import TypeAdapter

from codeloop.core.errors import ErrorCode
from codeloop.tools.domain.result import (
    DiffDisplay,
    DisplayPayload,
    StructuredDisplay,
    TextDisplay,
    ToolCallResult,
)


class TestSuccess:
    def test_model_payload_carries_output(self) -> None:
        result = ToolCallResult.success(
            call_id="c1", name="read_file", llm_content="hello", display=TextDisplay(text="ok")
        )

        assert result.status == "success"
        assert result.model_payload == {"output": "hello"}
        assert result.error_detail is None


class TestFailure:
    def test_carries_error_detail_and_code(self) -> None:
        result = ToolCallResult.failure(
            call_id="c1",
            name="read_file",
            code=ErrorCode.PATH_ESCAPE,
            message="Failed to validate path",
        )

        assert result.status == "error"
        assert result.error_detail is not None
        assert result.error_detail.code is ErrorCode.PATH_ESCAPE
        assert result.model_payload == {
            "error": "Failed to validate path",
            "code": "PATH_ESCAPE",
        }

    def test_display_defaults_to_message_text(self) -> None:
        result = ToolCallResult.failure(
            call_id="c1", name="x", code=ErrorCode.UNKNOWN_TOOL, message="no such tool"
        )

        assert result.display_payload == TextDisplay(text="no such tool")

    def test_output_is_kept_for_the_model(self) -> None:
        result = ToolCallResult.failure(
            call_id="c1",
            name="run_shell_command",
            code=ErrorCode.TOOL_EXECUTION_FAILURE,
            message="exit 1",
            llm_content="Stderr: boom",
        )

        assert result.model_payload["output"] == "Stderr: boom"


class TestDisplayPayloadUnion:
    def test_kind_selects_subtype(self) -> None:
        adapter = TypeAdapter(DisplayPayload)

        assert isinstance(adapter.validate_python({"kind": "text", "text": "t"}), TextDisplay)
        assert isinstance(
            adapter.validate_python({"kind": "diff", "file_path": "/a", "diff": "@@"}),
            DiffDisplay,
        )
        assert isinstance(
            adapter.validate_python({"kind": "structured", "data": {"a": 1}}),
            StructuredDisplay,
        )

    def test_result_survives_json_serialization(self) -> None:
        result = ToolCallResult.success(
            call_id="c1",
            name="write_file",
            llm_content="ok",
            display=DiffDisplay(file_path="/a.txt", diff="+x"),
        )

        restored = ToolCallResult.model_validate_json(result.model_dump_json())

        assert restored == result
