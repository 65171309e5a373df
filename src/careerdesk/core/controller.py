"""Reply controller: generate, dispatch actions, evaluate, revise."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from careerdesk.actions.registry import ActionRegistry
from careerdesk.core.backend import GenerationBackend
from careerdesk.core.evaluator import Evaluation, QualityEvaluator
from careerdesk.core.memory import ConversationStore, InMemoryConversationStore
from careerdesk.core.prompt import ESCALATION_FALLBACK, REVIEWER_FEEDBACK_TEMPLATE
from careerdesk.core.types import ActionRequest, ActionRequestBatch, ReplyResult, RevisionAttempt, Turn
from careerdesk.logging_utils import bind_request, release_request

DEFAULT_MAX_REVISIONS = 3
DEFAULT_MAX_ACTION_ROUNDS = 8


class LoopState(str, Enum):
    GENERATING = "generating"
    DISPATCHING_ACTIONS = "dispatching_actions"
    EVALUATING = "evaluating"
    ACCEPTED = "accepted"
    ESCALATED = "escalated"
    EXHAUSTED = "exhausted"


TERMINAL_STATES = frozenset({LoopState.ACCEPTED, LoopState.ESCALATED, LoopState.EXHAUSTED})


@dataclass
class ReplyLoop:
    """Per-message loop state and best-so-far accumulator."""

    transcript: list[Turn]
    state: LoopState = LoopState.GENERATING
    best_reply: str | None = None
    best_confidence: float = 0.0
    revision_count: int = 0
    action_rounds: int = 0
    candidate: str = ""
    evaluation: Evaluation | None = None
    pending_requests: tuple[ActionRequest, ...] = ()
    log: list[RevisionAttempt] = field(default_factory=list)

    def track_best(self, candidate: str, evaluation: Evaluation) -> bool:
        if evaluation.confidence > self.best_confidence:
            self.best_reply = candidate
            self.best_confidence = evaluation.confidence
            return True
        return False

    def outcome(self, fallback: str) -> tuple[str, float]:
        if self.state is LoopState.ESCALATED:
            return fallback, 0.0
        if self.state is LoopState.ACCEPTED and self.evaluation is not None:
            return self.candidate, self.evaluation.confidence
        if self.best_reply is None:
            # Nothing beat the initial confidence; hand back the last candidate.
            return self.candidate, 0.0
        return self.best_reply, self.best_confidence


class ReplyController:
    """Turns one employer message into a reviewed reply.

    The controller owns the conversation memory. Calls are serialized so that
    concurrent callers cannot interleave their turns.
    """

    def __init__(
        self,
        *,
        backend: GenerationBackend,
        evaluator: QualityEvaluator,
        registry: ActionRegistry,
        policy_source: Callable[[], str],
        memory: ConversationStore | None = None,
        max_revisions: int = DEFAULT_MAX_REVISIONS,
        max_action_rounds: int = DEFAULT_MAX_ACTION_ROUNDS,
        fallback_reply: str = ESCALATION_FALLBACK,
    ) -> None:
        if max_revisions < 1:
            raise ValueError("max_revisions must be at least 1")
        self._backend = backend
        self._evaluator = evaluator
        self._registry = registry
        self._policy_source = policy_source
        self._memory = memory if memory is not None else InMemoryConversationStore()
        self._max_revisions = max_revisions
        self._max_action_rounds = max_action_rounds
        self._fallback_reply = fallback_reply
        self._policy_text: str | None = None
        self._lock = asyncio.Lock()

    @property
    def memory(self) -> ConversationStore:
        return self._memory

    async def policy_text(self) -> str:
        """Resolve the persona/policy text once and reuse it afterwards."""
        if self._policy_text is None:
            self._policy_text = await asyncio.to_thread(self._policy_source)
        return self._policy_text

    async def handle_message(self, user_text: str) -> ReplyResult:
        text = user_text.strip()
        if not text:
            raise ValueError("user_text must not be empty")

        async with self._lock:
            token = bind_request(uuid.uuid4().hex[:8])
            try:
                return await self._run(text)
            finally:
                release_request(token)

    async def _run(self, user_text: str) -> ReplyResult:
        policy = await self.policy_text()
        user_turn = Turn.user(user_text)
        loop = ReplyLoop(transcript=[Turn.system(policy), *self._memory.read(), user_turn])

        while loop.state not in TERMINAL_STATES:
            if loop.state is LoopState.GENERATING:
                await self._generate(loop)
            elif loop.state is LoopState.DISPATCHING_ACTIONS:
                await self._dispatch(loop)
            else:
                await self._evaluate(loop, user_text, policy)

        reply, confidence = loop.outcome(self._fallback_reply)
        if loop.state is LoopState.EXHAUSTED:
            logger.warning("controller.exhausted revisions={} confidence={:.2f}", loop.revision_count, confidence)
        else:
            logger.info("controller.finish state={} confidence={:.2f}", loop.state.value, confidence)
        self._memory.append(user_turn, Turn.assistant(reply))
        return ReplyResult(reply=reply, confidence=confidence, evaluation_log=list(loop.log))

    async def _generate(self, loop: ReplyLoop) -> None:
        allow_actions = loop.action_rounds < self._max_action_rounds
        if not allow_actions:
            logger.warning("controller.action_rounds.exceeded rounds={}", loop.action_rounds)
        response = await self._backend.generate(loop.transcript, self._registry.schemas() if allow_actions else [])

        if isinstance(response, ActionRequestBatch):
            if allow_actions:
                loop.transcript.append(Turn.assistant(response.text, response.requests))
                loop.pending_requests = response.requests
                loop.state = LoopState.DISPATCHING_ACTIONS
                return
            logger.warning("controller.actions.ignored count={}", len(response.requests))

        loop.candidate = response.text
        loop.action_rounds = 0
        loop.state = LoopState.EVALUATING

    async def _dispatch(self, loop: ReplyLoop) -> None:
        results = await self._registry.dispatch_all(loop.pending_requests)
        loop.transcript.extend(Turn.action_result(result) for result in results)
        loop.pending_requests = ()
        loop.action_rounds += 1
        loop.state = LoopState.GENERATING

    async def _evaluate(self, loop: ReplyLoop, user_text: str, policy: str) -> None:
        evaluation = await self._evaluator.evaluate(loop.candidate, user_text, policy)
        loop.evaluation = evaluation
        loop.log.append(RevisionAttempt(revision=loop.revision_count, candidate=loop.candidate, evaluation=evaluation))

        if evaluation.out_of_scope:
            loop.state = LoopState.ESCALATED
            return

        loop.track_best(loop.candidate, evaluation)
        if evaluation.is_acceptable:
            loop.state = LoopState.ACCEPTED
            return

        loop.revision_count += 1
        if loop.revision_count >= self._max_revisions:
            loop.state = LoopState.EXHAUSTED
            return

        logger.info("controller.revision revision={} feedback={!r}", loop.revision_count, evaluation.feedback)
        loop.transcript.append(Turn.assistant(loop.candidate))
        loop.transcript.append(Turn.user(REVIEWER_FEEDBACK_TEMPLATE.format(feedback=evaluation.feedback)))
        loop.state = LoopState.GENERATING
