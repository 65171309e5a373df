"""Conversation memory stores."""

from __future__ import annotations

import threading
from typing import Protocol

from careerdesk.core.types import Turn


class ConversationStore(Protocol):
    """Append-only turn storage owned by one controller."""

    def append(self, *turns: Turn) -> None: ...

    def read(self) -> list[Turn]: ...


class InMemoryConversationStore:
    """Process-lifetime conversation memory."""

    def __init__(self, turns: list[Turn] | None = None) -> None:
        self._turns: list[Turn] = list(turns or [])
        self._lock = threading.Lock()

    def append(self, *turns: Turn) -> None:
        if not turns:
            return
        with self._lock:
            self._turns.extend(turns)

    def read(self) -> list[Turn]:
        with self._lock:
            return list(self._turns)

    def __len__(self) -> int:
        with self._lock:
            return len(self._turns)
