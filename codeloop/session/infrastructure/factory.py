"""Composition root — wires a TurnEngine from an AgentConfig."""

import uuid

from codeloop.backend.application.resilience import ResilienceController
from codeloop.backend.domain.backend import ModelBackend
from codeloop.backend.domain.fallback import FallbackHandler
from codeloop.backend.infrastructure.litellm_backend import LiteLLMBackend
from codeloop.backend.infrastructure.observer import StructlogResilienceObserver
from codeloop.config.domain.config import AgentConfig
from codeloop.confirmation.application.gate import ConfirmationGate
from codeloop.confirmation.domain.provider import ApprovalProvider
from codeloop.confirmation.infrastructure.observer import StructlogConfirmationObserver
from codeloop.session.application.turn_engine import TurnEngine
from codeloop.session.domain.conversation import ConversationState
from codeloop.session.infrastructure.json_checkpoint import JsonFileCheckpointer
from codeloop.session.infrastructure.observer import StructlogSessionObserver
from codeloop.tools.application.invoker import ToolInvoker
from codeloop.tools.infrastructure.builtin import create_builtin_registry
from codeloop.tools.infrastructure.observer import StructlogToolObserver


def create_turn_engine(
    config: AgentConfig,
    approval_provider: ApprovalProvider,
    fallback_handler: FallbackHandler | None = None,
    session_id: str | None = None,
    backend: ModelBackend | None = None,
) -> TurnEngine:
    """Build a TurnEngine with the built-in tools and structlog observers.

    When config.session.checkpoint_dir is set, snapshots are saved there and
    an existing snapshot for session_id is resumed.
    """
    session_id = session_id or uuid.uuid4().hex
    registry = create_builtin_registry(config.tools)

    checkpointer = None
    conversation = None
    if config.session.checkpoint_dir is not None:
        checkpointer = JsonFileCheckpointer(directory=config.session.checkpoint_dir)
        stored = checkpointer.load(session_id)
        if stored is not None:
            conversation = ConversationState.from_snapshot(stored)

    resilience = ResilienceController(
        backend=backend
        or LiteLLMBackend(config=config.backend, system_prompt=config.session.system_prompt),
        backend_config=config.backend,
        resilience_config=config.resilience,
        observer=StructlogResilienceObserver(),
        fallback_handler=fallback_handler,
    )
    gate = ConfirmationGate(
        registry=registry,
        approval_provider=approval_provider,
        observer=StructlogConfirmationObserver(),
        auto_approved_tools=frozenset(config.tools.read_only_tools),
    )
    invoker = ToolInvoker(
        registry=registry,
        root_dir=str(config.tools.root_dir),
        observer=StructlogToolObserver(),
    )
    return TurnEngine(
        session_id=session_id,
        resilience=resilience,
        gate=gate,
        invoker=invoker,
        registry=registry,
        observer=StructlogSessionObserver(),
        max_rounds=config.session.max_rounds,
        auth_type=config.backend.auth_type,
        checkpointer=checkpointer,
        conversation=conversation,
    )
