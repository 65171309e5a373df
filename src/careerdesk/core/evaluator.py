"""Reply quality evaluation."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from typing import Any, Protocol

from loguru import logger
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError

from careerdesk.core.prompt import EVALUATOR_PROMPT
from careerdesk.errors import EvaluationError, MalformedEvaluationError

SCORE_SCALE = 10.0
SCORE_FLOOR = 5.0
ACCEPTANCE_THRESHOLD = 5.0
RELEVANCE_FLOOR = 2.0
OUT_OF_SCOPE_MARKER = "OUT_OF_SCOPE: "


@dataclass(frozen=True)
class Scores:
    """Six criterion scores on a 0..SCORE_SCALE range."""

    professionalism: float
    clarity: float
    completeness: float
    safety: float
    relevance: float
    career_relevance: float

    def values(self) -> list[float]:
        return [getattr(self, item.name) for item in fields(self)]

    def mean(self) -> float:
        values = self.values()
        return sum(values) / len(values)

    def as_dict(self) -> dict[str, float]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(frozen=True)
class AcceptancePolicy:
    score_floor: float = SCORE_FLOOR
    threshold: float = ACCEPTANCE_THRESHOLD
    relevance_floor: float = RELEVANCE_FLOOR


@dataclass(frozen=True)
class Evaluation:
    """Judgment of one candidate reply."""

    scores: Scores
    is_acceptable: bool
    confidence: float
    feedback: str

    @property
    def out_of_scope(self) -> bool:
        return self.feedback.startswith(OUT_OF_SCOPE_MARKER)


def apply_acceptance_rule(
    scores: Scores,
    feedback: str,
    *,
    confidence: float | None = None,
    policy: AcceptancePolicy | None = None,
) -> Evaluation:
    """Build an Evaluation whose verdict depends on the scores and the out-of-scope marker.

    The out-of-scope override wins over the general floor/threshold rule.
    A judge that flags the message as out of scope keeps its marker and the
    reply is never acceptable; otherwise the marker is added only when the
    relevance score fails.
    """
    policy = policy or AcceptancePolicy()
    mean = scores.mean()
    if confidence is None:
        confidence = mean / SCORE_SCALE
    confidence = min(max(confidence, 0.0), 1.0)

    flagged = feedback.startswith(OUT_OF_SCOPE_MARKER)
    body = feedback.removeprefix(OUT_OF_SCOPE_MARKER).strip()
    if flagged or scores.career_relevance < policy.relevance_floor:
        return Evaluation(
            scores=scores,
            is_acceptable=False,
            confidence=confidence,
            feedback=f"{OUT_OF_SCOPE_MARKER}{body or 'message is unrelated to career topics'}",
        )

    acceptable = all(value >= policy.score_floor for value in scores.values()) and mean >= policy.threshold
    return Evaluation(scores=scores, is_acceptable=acceptable, confidence=confidence, feedback=body)


class QualityEvaluator(Protocol):
    async def evaluate(self, candidate_reply: str, triggering_message: str, policy_text: str) -> Evaluation: ...


class _ScoresPayload(BaseModel):
    professionalism: float = Field(ge=0, le=SCORE_SCALE)
    clarity: float = Field(ge=0, le=SCORE_SCALE)
    completeness: float = Field(ge=0, le=SCORE_SCALE)
    safety: float = Field(ge=0, le=SCORE_SCALE)
    relevance: float = Field(ge=0, le=SCORE_SCALE)
    career_relevance: float = Field(ge=0, le=SCORE_SCALE)


class EvaluationPayload(BaseModel):
    """Raw judge answer."""

    scores: _ScoresPayload
    feedback: str
    is_acceptable: bool | None = None
    confidence: float | None = None


def parse_evaluation(raw: str | dict[str, Any], policy: AcceptancePolicy | None = None) -> Evaluation:
    """Validate a judge answer and apply the acceptance rule to it."""
    try:
        data = json.loads(raw) if isinstance(raw, str) else raw
        payload = EvaluationPayload.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise MalformedEvaluationError(f"malformed evaluator response: {exc}") from exc

    evaluation = apply_acceptance_rule(
        Scores(**payload.scores.model_dump()),
        payload.feedback,
        confidence=payload.confidence,
        policy=policy,
    )
    if payload.is_acceptable is not None and payload.is_acceptable != evaluation.is_acceptable:
        logger.debug(
            "evaluator.verdict_overridden judge={} rule={}",
            payload.is_acceptable,
            evaluation.is_acceptable,
        )
    return evaluation


class OpenAIQualityEvaluator:
    """LLM judge backed by an OpenAI-compatible chat endpoint."""

    def __init__(self, client: AsyncOpenAI, *, model: str, policy: AcceptancePolicy | None = None) -> None:
        self._client = client
        self._model = model
        self._policy = policy or AcceptancePolicy()

    async def evaluate(self, candidate_reply: str, triggering_message: str, policy_text: str) -> Evaluation:
        prompt = EVALUATOR_PROMPT.format(
            policy=policy_text,
            message=triggering_message,
            reply=candidate_reply,
            score_floor=self._policy.score_floor,
            threshold=self._policy.threshold,
            relevance_floor=self._policy.relevance_floor,
            marker=OUT_OF_SCOPE_MARKER,
        )
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=0,
            )
        except OpenAIError as exc:
            logger.exception("evaluator.call.error model={}", self._model)
            raise EvaluationError(f"evaluator_call_error: {exc!s}") from exc

        choices = getattr(response, "choices", None)
        content = choices[0].message.content if choices else None
        if not content:
            raise MalformedEvaluationError("malformed evaluator response: empty content")

        evaluation = parse_evaluation(content, self._policy)
        logger.info(
            "evaluator.verdict scores={} acceptable={} confidence={:.2f}",
            evaluation.scores.as_dict(),
            evaluation.is_acceptable,
            evaluation.confidence,
        )
        return evaluation
