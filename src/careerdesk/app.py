"""Controller bootstrap helpers."""

from __future__ import annotations

from collections.abc import Callable

from openai import AsyncOpenAI

from careerdesk.actions.builtin import register_builtin_actions
from careerdesk.actions.registry import ActionRegistry
from careerdesk.config import Settings, load_settings
from careerdesk.core.backend import OpenAIGenerationBackend
from careerdesk.core.controller import ReplyController
from careerdesk.core.evaluator import AcceptancePolicy, OpenAIQualityEvaluator
from careerdesk.core.prompt import DEFAULT_SYSTEM_PROMPT
from careerdesk.notify import build_notifier
from careerdesk.persona import load_persona_context

# Global singleton controller instance
_controller: ReplyController | None = None


def render_policy(template: str, context: str) -> str:
    return template.replace("{context}", context).strip()


def build_policy_source(settings: Settings) -> Callable[[], str]:
    template = settings.system_prompt or DEFAULT_SYSTEM_PROMPT

    def _load() -> str:
        return render_policy(template, load_persona_context(settings.context_dir))

    return _load


def build_controller(settings: Settings) -> ReplyController:
    """Wire backend, evaluator, actions and memory from settings."""

    client = AsyncOpenAI(
        api_key=settings.resolved_api_key,
        base_url=settings.api_base,
        timeout=settings.request_timeout_seconds,
    )
    notifier = build_notifier(
        settings.pushover_token,
        settings.pushover_user,
        timeout_seconds=settings.notify_timeout_seconds,
    )
    policy = AcceptancePolicy(
        score_floor=settings.score_floor,
        threshold=settings.acceptance_threshold,
        relevance_floor=settings.relevance_floor,
    )
    return ReplyController(
        backend=OpenAIGenerationBackend(client, model=settings.model, temperature=settings.temperature),
        evaluator=OpenAIQualityEvaluator(client, model=settings.resolved_evaluator_model, policy=policy),
        registry=register_builtin_actions(ActionRegistry(notifier)),
        policy_source=build_policy_source(settings),
        max_revisions=settings.max_revisions,
        max_action_rounds=settings.max_action_rounds,
    )


def get_controller() -> ReplyController:
    """Get or create the process-wide controller."""
    global _controller
    if _controller is None:
        _controller = build_controller(load_settings())
    return _controller


def set_controller(controller: ReplyController | None) -> None:
    global _controller
    _controller = controller
