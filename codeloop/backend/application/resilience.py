"""ResilienceController — wraps the backend with a circuit breaker and model fallback."""

from collections.abc import AsyncIterator, Callable

from codeloop.backend.domain.backend import ModelBackend
from codeloop.backend.domain.chunk import StreamChunk
from codeloop.backend.domain.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerState,
    CircuitStatus,
)
from codeloop.backend.domain.errors import BackendRateLimitedError, BackendRequestError
from codeloop.backend.domain.fallback import FallbackHandler
from codeloop.backend.domain.observer import ResilienceObserver
from codeloop.config.domain.config import BackendConfig, ResilienceConfig
from codeloop.session.domain.conversation import ConversationSnapshot
from codeloop.tools.domain.registry import ToolSchema


class ResilienceController:
    """Streams responses from the primary model, falling back when it is rate limited.

    One controller (and therefore one CircuitBreaker) belongs to one session.
    A rate limit raised before any chunk was yielded is retried on the
    fallback model; once chunks have reached the caller the error is surfaced
    instead, since a partial response cannot be replayed.
    """

    def __init__(
        self,
        backend: ModelBackend,
        backend_config: BackendConfig,
        resilience_config: ResilienceConfig,
        observer: ResilienceObserver,
        breaker: CircuitBreaker | None = None,
        fallback_handler: FallbackHandler | None = None,
    ) -> None:
        self._backend = backend
        self._backend_config = backend_config
        self._resilience_config = resilience_config
        self._observer = observer
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=resilience_config.failure_threshold,
            recovery_seconds=resilience_config.recovery_seconds,
        )
        self._fallback_handler = fallback_handler
        self._fallback_confirmed: bool | None = None

    @property
    def breaker_state(self) -> CircuitBreakerState:
        return self._breaker.state

    async def stream_response(
        self,
        conversation: ConversationSnapshot,
        tools: list[ToolSchema],
        auth_type: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Yield the model's response chunks.

        Raises:
            BackendRateLimitedError: if the primary is rate limited (or the
                circuit is open) and no fallback is permitted, or the fallback
                is rate limited too.
            BackendRequestError: if the model that was called failed for any
                other reason.
        """
        primary = self._backend_config.model

        if self._current_status() is CircuitStatus.OPEN:
            fallback = await self._permitted_fallback(auth_type=auth_type)
            if fallback is None:
                raise BackendRateLimitedError(
                    model=primary, reason="circuit open, waiting for recovery"
                )
            async for chunk in self._stream_fallback(fallback, conversation, tools):
                yield chunk
            return

        yielded = False
        self._observer.backend_request_started(model=primary, is_fallback=False)
        try:
            async for chunk in self._backend.stream(
                model=primary, conversation=conversation, tools=tools
            ):
                yielded = True
                yield chunk
        except BackendRateLimitedError as exc:
            self._observer.backend_request_failed(
                model=primary, rate_limited=True, reason=str(exc)
            )
            self._transition(self._breaker.record_rate_limit)
            if yielded:
                raise
            fallback = await self._permitted_fallback(auth_type=auth_type)
            if fallback is None:
                raise
        except BackendRequestError as exc:
            self._observer.backend_request_failed(
                model=primary, rate_limited=False, reason=str(exc)
            )
            self._transition(self._breaker.record_failure)
            raise
        else:
            self._transition(self._breaker.record_success)
            return

        async for chunk in self._stream_fallback(fallback, conversation, tools):
            yield chunk

    async def _stream_fallback(
        self, model: str, conversation: ConversationSnapshot, tools: list[ToolSchema]
    ) -> AsyncIterator[StreamChunk]:
        # Fallback outcomes never move the breaker; only primary probes close it.
        self._observer.backend_request_started(model=model, is_fallback=True)
        try:
            async for chunk in self._backend.stream(
                model=model, conversation=conversation, tools=tools
            ):
                yield chunk
        except (BackendRateLimitedError, BackendRequestError) as exc:
            self._observer.backend_request_failed(
                model=model,
                rate_limited=isinstance(exc, BackendRateLimitedError),
                reason=str(exc),
            )
            raise

    async def _permitted_fallback(self, auth_type: str | None) -> str | None:
        primary = self._backend_config.model
        fallback = self._backend_config.fallback_model
        if not fallback or fallback == primary:
            return None

        allowed_auth_types = self._resilience_config.fallback_auth_types
        if allowed_auth_types and auth_type not in allowed_auth_types:
            return None

        # The handler is asked once per session; its answer is remembered.
        if self._fallback_confirmed is None:
            if self._fallback_handler is None:
                self._fallback_confirmed = True
            else:
                self._fallback_confirmed = await self._fallback_handler.confirm_fallback(
                    primary_model=primary, fallback_model=fallback
                )
            if not self._fallback_confirmed:
                self._observer.fallback_declined(
                    primary_model=primary, fallback_model=fallback
                )

        if not self._fallback_confirmed:
            return None
        self._observer.fallback_engaged(primary_model=primary, fallback_model=fallback)
        return fallback

    def _current_status(self) -> CircuitStatus:
        before = self._breaker.state
        status = self._breaker.current_status()
        self._report_change(before, self._breaker.state)
        return status

    def _transition(self, record: Callable[[], CircuitBreakerState]) -> None:
        before = self._breaker.state
        after = record()
        self._report_change(before, after)

    def _report_change(
        self, before: CircuitBreakerState, after: CircuitBreakerState
    ) -> None:
        if before.status is not after.status:
            self._observer.circuit_state_changed(
                previous=before.status.value,
                current=after.status.value,
                consecutive_failures=after.consecutive_failures,
            )
