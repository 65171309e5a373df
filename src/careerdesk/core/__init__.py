"""Reply loop core."""

from careerdesk.core.controller import LoopState, ReplyController
from careerdesk.core.evaluator import AcceptancePolicy, Evaluation, Scores, apply_acceptance_rule
from careerdesk.core.memory import ConversationStore, InMemoryConversationStore
from careerdesk.core.types import ActionRequest, ActionResult, ReplyResult, RevisionAttempt, Role, Turn

__all__ = [
    "AcceptancePolicy",
    "ActionRequest",
    "ActionResult",
    "ConversationStore",
    "Evaluation",
    "InMemoryConversationStore",
    "LoopState",
    "ReplyController",
    "ReplyResult",
    "RevisionAttempt",
    "Role",
    "Scores",
    "Turn",
    "apply_acceptance_rule",
]
