"""Shared core dataclasses."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from careerdesk.core.evaluator import Evaluation


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    ACTION_RESULT = "action_result"


@dataclass(frozen=True)
class ActionRequest:
    """One action invocation requested by the generation backend."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of dispatching one action request."""

    request_id: str
    name: str
    success: bool
    output: str = ""
    error: str | None = None

    def to_content(self) -> str:
        payload: dict[str, Any] = {"success": self.success}
        if self.output:
            payload["output"] = self.output
        if self.error:
            payload["error"] = self.error
        return json.dumps(payload, ensure_ascii=False)


@dataclass(frozen=True)
class Turn:
    """One conversational unit in a transcript."""

    role: Role
    content: str = ""
    action_requests: tuple[ActionRequest, ...] = ()
    action_request_id: str | None = None

    @classmethod
    def user(cls, content: str) -> Turn:
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str, action_requests: tuple[ActionRequest, ...] = ()) -> Turn:
        return cls(Role.ASSISTANT, content, action_requests=action_requests)

    @classmethod
    def system(cls, content: str) -> Turn:
        return cls(Role.SYSTEM, content)

    @classmethod
    def action_result(cls, result: ActionResult) -> Turn:
        return cls(Role.ACTION_RESULT, result.to_content(), action_request_id=result.request_id)


@dataclass(frozen=True)
class TextReply:
    """Backend produced a candidate reply."""

    text: str


@dataclass(frozen=True)
class ActionRequestBatch:
    """Backend asked for one or more actions before replying."""

    requests: tuple[ActionRequest, ...]
    text: str = ""


type GenerationResponse = TextReply | ActionRequestBatch


@dataclass(frozen=True)
class RevisionAttempt:
    """One evaluated candidate inside a single reply loop."""

    revision: int
    candidate: str
    evaluation: Evaluation

    def to_dict(self) -> dict[str, Any]:
        return {
            "revision": self.revision,
            "is_acceptable": self.evaluation.is_acceptable,
            "feedback": self.evaluation.feedback,
            "confidence": self.evaluation.confidence,
            "scores": self.evaluation.scores.as_dict(),
        }


@dataclass(frozen=True)
class ReplyResult:
    """Finished reply for one inbound message."""

    reply: str
    confidence: float
    evaluation_log: list[RevisionAttempt] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reply": self.reply,
            "confidence": self.confidence,
            "evaluation_log": [attempt.to_dict() for attempt in self.evaluation_log],
        }
