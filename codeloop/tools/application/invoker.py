"""ToolInvoker — validates and executes one tool call, always producing a result."""

import asyncio
import os
import time

from pydantic import ValidationError

from codeloop.core.cancellation import OperationCancelledError
from codeloop.core.errors import CodeloopError, ErrorCode
from codeloop.security.domain.command import validate_command
from codeloop.security.domain.errors import UnsafeCommandError
from codeloop.security.domain.path import resolve_within_root
from codeloop.tools.domain.errors import InvalidArgumentsError, UnknownToolError
from codeloop.tools.domain.observer import ToolObserver
from codeloop.tools.domain.registry import ToolOutput, ToolRegistry
from codeloop.tools.domain.request import ToolCallRequest
from codeloop.tools.domain.result import ToolCallResult


class ToolInvoker:
    """Runs ToolCallRequests against a registry.

    Every failure is converted into an error ToolCallResult carrying an
    ErrorCode; only cancellation propagates, as OperationCancelledError.
    """

    def __init__(
        self, registry: ToolRegistry, root_dir: str, observer: ToolObserver
    ) -> None:
        self._registry = registry
        self._root_dir = root_dir
        self._observer = observer

    async def invoke(
        self, request: ToolCallRequest, cancel: asyncio.Event | None = None
    ) -> ToolCallResult:
        self._observer.tool_invocation_started(
            call_id=request.call_id, name=request.name
        )
        start = time.monotonic()

        try:
            output = await self._validate_and_execute(request=request, cancel=cancel)
        except OperationCancelledError:
            raise
        except CodeloopError as exc:
            return self._failed(
                request=request,
                code=exc.code or ErrorCode.TOOL_EXECUTION_FAILURE,
                message=str(exc),
            )
        except Exception as exc:
            return self._failed(
                request=request,
                code=ErrorCode.TOOL_EXECUTION_FAILURE,
                message=f"Failed to execute tool '{request.name}': {exc}",
            )

        if output.is_error:
            return self._failed(
                request=request,
                code=ErrorCode.TOOL_EXECUTION_FAILURE,
                message=f"Failed to execute tool '{request.name}': tool reported an error",
                output=output,
            )

        duration_ms = int((time.monotonic() - start) * 1000)
        self._observer.tool_invocation_completed(
            call_id=request.call_id, name=request.name, duration_ms=duration_ms
        )
        return ToolCallResult.success(
            call_id=request.call_id,
            name=request.name,
            llm_content=output.llm_content,
            display=output.display,
        )

    async def _validate_and_execute(
        self, request: ToolCallRequest, cancel: asyncio.Event | None
    ) -> ToolOutput:
        schema = self._registry.get_schema(request.name)
        if schema is None:
            raise UnknownToolError(name=request.name)

        try:
            arguments = self._registry.parse_arguments(
                name=request.name, arguments=request.arguments
            )
        except ValidationError as exc:
            raise InvalidArgumentsError(
                name=request.name, reason=_summarize_validation_error(exc)
            ) from exc

        for argument_name in schema.path_arguments:
            value = getattr(arguments, argument_name, None)
            if value is None:
                continue
            if not os.path.isabs(value):
                raise InvalidArgumentsError(
                    name=request.name,
                    reason=f"'{argument_name}' must be an absolute path, got '{value}'",
                )
            resolve_within_root(path=value, root=self._root_dir)

        if schema.command_argument is not None:
            command = getattr(arguments, schema.command_argument)
            reason = validate_command(command)
            if reason is not None:
                raise UnsafeCommandError(command=command, reason=reason)

        return await self._registry.execute(
            name=request.name, arguments=arguments, cancel=cancel
        )

    def _failed(
        self,
        request: ToolCallRequest,
        code: ErrorCode,
        message: str,
        output: ToolOutput | None = None,
    ) -> ToolCallResult:
        self._observer.tool_invocation_failed(
            call_id=request.call_id,
            name=request.name,
            code=code.value,
            reason=message,
        )
        return ToolCallResult.failure(
            call_id=request.call_id,
            name=request.name,
            code=code,
            message=message,
            display=output.display if output is not None else None,
            llm_content=output.llm_content if output is not None else None,
        )


def _summarize_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
