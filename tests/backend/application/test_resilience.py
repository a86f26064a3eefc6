"""Tests for ResilienceController — breaker bookkeeping and model fallback."""

import pytest

from codeloop.backend.application.resilience import ResilienceController
from codeloop.backend.domain.chunk import StreamChunk
from codeloop.backend.domain.circuit_breaker import CircuitBreaker, CircuitStatus
from codeloop.backend.domain.errors import BackendRateLimitedError, BackendRequestError
from codeloop.config.domain.config import BackendConfig, ResilienceConfig
from codeloop.session.domain.conversation import ConversationSnapshot
from tests.backend.fake_backend import FakeBackend, failure, text
from tests.backend.fake_clock import FakeClock
from tests.backend.fake_fallback_handler import FakeFallbackHandler
from tests.backend.fake_observer import FakeResilienceObserver

PRIMARY = "primary-model"
FALLBACK = "fallback-model"


def _rate_limited(model: str = PRIMARY) -> BackendRateLimitedError:
    return BackendRateLimitedError(model=model, reason="429 Too Many Requests")


def _make_controller(
    backend: FakeBackend,
    threshold: int = 2,
    recovery_seconds: float = 60.0,
    fallback_model: str | None = FALLBACK,
    fallback_auth_types: list[str] | None = None,
    fallback_handler: FakeFallbackHandler | None = None,
) -> tuple[ResilienceController, FakeResilienceObserver, FakeClock]:
    clock = FakeClock()
    observer = FakeResilienceObserver()
    controller = ResilienceController(
        backend=backend,
        backend_config=BackendConfig(model=PRIMARY, fallback_model=fallback_model),
        resilience_config=ResilienceConfig(
            failure_threshold=threshold,
            recovery_seconds=recovery_seconds,
            fallback_auth_types=fallback_auth_types or [],
        ),
        observer=observer,
        breaker=CircuitBreaker(
            failure_threshold=threshold, recovery_seconds=recovery_seconds, clock=clock
        ),
        fallback_handler=fallback_handler,
    )
    return controller, observer, clock


async def _collect(
    controller: ResilienceController, auth_type: str | None = None
) -> list[StreamChunk]:
    return [
        chunk
        async for chunk in controller.stream_response(
            conversation=ConversationSnapshot(), tools=[], auth_type=auth_type
        )
    ]


class TestPrimaryHealthy:
    async def test_streams_primary_chunks(self) -> None:
        backend = FakeBackend({PRIMARY: [text("hel", "lo")]})
        controller, _, _ = _make_controller(backend)

        chunks = await _collect(controller)

        assert [c.text for c in chunks] == ["hel", "lo"]
        assert [c.model for c in backend.calls] == [PRIMARY]

    async def test_request_error_is_raised_and_not_counted(self) -> None:
        backend = FakeBackend({PRIMARY: [failure(BackendRequestError(model=PRIMARY, reason="401"))]})
        controller, observer, _ = _make_controller(backend, threshold=1)

        with pytest.raises(BackendRequestError):
            await _collect(controller)

        assert controller.breaker_state.status is CircuitStatus.CLOSED
        assert observer.requests_failed[0].rate_limited is False


class TestRateLimitFallback:
    async def test_rate_limit_is_served_by_fallback(self) -> None:
        backend = FakeBackend(
            {PRIMARY: [failure(_rate_limited())], FALLBACK: [text("from fallback")]}
        )
        controller, observer, _ = _make_controller(backend)

        chunks = await _collect(controller)

        assert [c.text for c in chunks] == ["from fallback"]
        assert [c.model for c in backend.calls] == [PRIMARY, FALLBACK]
        assert controller.breaker_state.consecutive_failures == 1
        assert len(observer.fallbacks_engaged) == 1

    async def test_without_fallback_model_rate_limit_is_raised(self) -> None:
        backend = FakeBackend({PRIMARY: [failure(_rate_limited())]})
        controller, _, _ = _make_controller(backend, fallback_model=None)

        with pytest.raises(BackendRateLimitedError):
            await _collect(controller)

    async def test_both_models_rate_limited_raises(self) -> None:
        backend = FakeBackend(
            {PRIMARY: [failure(_rate_limited())], FALLBACK: [failure(_rate_limited(FALLBACK))]}
        )
        controller, _, _ = _make_controller(backend)

        with pytest.raises(BackendRateLimitedError) as exc_info:
            await _collect(controller)

        assert exc_info.value.model == FALLBACK

    async def test_rate_limit_after_partial_output_is_raised(self) -> None:
        backend = FakeBackend(
            {PRIMARY: [failure(_rate_limited(), StreamChunk(text="partial"))]}
        )
        controller, _, _ = _make_controller(backend)

        received: list[StreamChunk] = []
        with pytest.raises(BackendRateLimitedError):
            async for chunk in controller.stream_response(
                conversation=ConversationSnapshot(), tools=[]
            ):
                received.append(chunk)

        assert [c.text for c in received] == ["partial"]
        assert [c.model for c in backend.calls] == [PRIMARY]
        assert controller.breaker_state.consecutive_failures == 1

    async def test_auth_type_not_listed_disables_fallback(self) -> None:
        backend = FakeBackend({PRIMARY: [failure(_rate_limited())]})
        controller, _, _ = _make_controller(backend, fallback_auth_types=["oauth"])

        with pytest.raises(BackendRateLimitedError):
            await _collect(controller, auth_type="api_key")

        assert [c.model for c in backend.calls] == [PRIMARY]

    async def test_auth_type_listed_enables_fallback(self) -> None:
        backend = FakeBackend({PRIMARY: [failure(_rate_limited())], FALLBACK: [text("ok")]})
        controller, _, _ = _make_controller(backend, fallback_auth_types=["oauth"])

        chunks = await _collect(controller, auth_type="oauth")

        assert [c.text for c in chunks] == ["ok"]


class TestFallbackHandler:
    async def test_handler_is_asked_once_per_session(self) -> None:
        backend = FakeBackend(
            {
                PRIMARY: [failure(_rate_limited()), failure(_rate_limited())],
                FALLBACK: [text("one"), text("two")],
            }
        )
        handler = FakeFallbackHandler(accept=True)
        controller, _, _ = _make_controller(backend, threshold=5, fallback_handler=handler)

        await _collect(controller)
        await _collect(controller)

        assert handler.asked == [(PRIMARY, FALLBACK)]

    async def test_declined_fallback_raises_rate_limit(self) -> None:
        backend = FakeBackend({PRIMARY: [failure(_rate_limited())]})
        handler = FakeFallbackHandler(accept=False)
        controller, observer, _ = _make_controller(backend, fallback_handler=handler)

        with pytest.raises(BackendRateLimitedError):
            await _collect(controller)

        assert len(observer.fallbacks_declined) == 1
        assert backend.calls_for(FALLBACK) == []


class TestOpenCircuit:
    async def _open(
        self, backend: FakeBackend
    ) -> tuple[ResilienceController, FakeResilienceObserver, FakeClock]:
        controller, observer, clock = _make_controller(backend, threshold=2)
        await _collect(controller)
        await _collect(controller)
        assert controller.breaker_state.status is CircuitStatus.OPEN
        return controller, observer, clock

    async def test_open_circuit_skips_primary(self) -> None:
        backend = FakeBackend(
            {PRIMARY: [failure(_rate_limited()), failure(_rate_limited())]}
        )
        controller, observer, _ = await self._open(backend)
        calls_before = len(backend.calls_for(PRIMARY))

        chunks = await _collect(controller)

        assert [c.text for c in chunks] == ["done"]
        assert len(backend.calls_for(PRIMARY)) == calls_before
        assert observer.circuit_changes[-1].current == "open"

    async def test_open_circuit_without_fallback_fails_fast(self) -> None:
        backend = FakeBackend(
            {PRIMARY: [failure(_rate_limited()), failure(_rate_limited())]}
        )
        controller, _, _ = _make_controller(backend, threshold=2, fallback_model=None)
        for _ in range(2):
            with pytest.raises(BackendRateLimitedError):
                await _collect(controller)

        with pytest.raises(BackendRateLimitedError, match="circuit open"):
            await _collect(controller)

        assert len(backend.calls_for(PRIMARY)) == 2

    async def test_fallback_success_does_not_close_circuit(self) -> None:
        backend = FakeBackend(
            {PRIMARY: [failure(_rate_limited()), failure(_rate_limited())]}
        )
        controller, _, _ = await self._open(backend)

        await _collect(controller)

        assert controller.breaker_state.status is CircuitStatus.OPEN

    async def test_probe_success_after_deadline_closes(self) -> None:
        backend = FakeBackend(
            {PRIMARY: [failure(_rate_limited()), failure(_rate_limited()), text("back")]}
        )
        controller, observer, clock = await self._open(backend)
        clock.advance(60)

        chunks = await _collect(controller)

        assert [c.text for c in chunks] == ["back"]
        assert controller.breaker_state.status is CircuitStatus.CLOSED
        assert [(e.previous, e.current) for e in observer.circuit_changes] == [
            ("closed", "open"),
            ("open", "half_open"),
            ("half_open", "closed"),
        ]

    async def test_probe_rate_limit_reopens_and_uses_fallback(self) -> None:
        backend = FakeBackend(
            {
                PRIMARY: [
                    failure(_rate_limited()),
                    failure(_rate_limited()),
                    failure(_rate_limited()),
                ],
                FALLBACK: [text("a"), text("b"), text("c")],
            }
        )
        controller, _, clock = await self._open(backend)
        clock.advance(60)

        chunks = await _collect(controller)

        assert controller.breaker_state.status is CircuitStatus.OPEN
        assert controller.breaker_state.recovery_deadline == clock.now + 60
        assert len(chunks) == 1
