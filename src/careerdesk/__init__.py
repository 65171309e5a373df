"""careerdesk - a self-reviewing career assistant."""

from .core import ReplyController, ReplyResult

__version__ = "0.1.0"

__all__ = ["ReplyController", "ReplyResult"]
