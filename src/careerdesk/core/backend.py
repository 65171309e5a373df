"""Generation backend boundary."""

from __future__ import annotations

import json
from typing import Any, Protocol

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from careerdesk.core.types import ActionRequest, ActionRequestBatch, GenerationResponse, Role, TextReply, Turn
from careerdesk.errors import GenerationError


class GenerationBackend(Protocol):
    async def generate(self, transcript: list[Turn], actions: list[dict[str, Any]]) -> GenerationResponse: ...


def turn_to_message(turn: Turn) -> dict[str, Any]:
    """Render one transcript turn as a chat-completions message."""
    if turn.role is Role.ACTION_RESULT:
        return {"role": "tool", "tool_call_id": turn.action_request_id, "content": turn.content}
    if turn.role is Role.ASSISTANT and turn.action_requests:
        return {
            "role": "assistant",
            "content": turn.content or None,
            "tool_calls": [
                {
                    "id": request.id,
                    "type": "function",
                    "function": {
                        "name": request.name,
                        "arguments": json.dumps(request.arguments, ensure_ascii=False),
                    },
                }
                for request in turn.action_requests
            ],
        }
    return {"role": turn.role.value, "content": turn.content}


def decode_response(response: Any) -> GenerationResponse:
    """Turn a chat-completions response into a TextReply or ActionRequestBatch."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise GenerationError("generation_error: response has no choices")
    message = getattr(choices[0], "message", None)
    if message is None:
        raise GenerationError("generation_error: response has no message")

    text = getattr(message, "content", None) or ""
    requests: list[ActionRequest] = []
    for idx, tool_call in enumerate(getattr(message, "tool_calls", None) or []):
        function = getattr(tool_call, "function", None)
        if function is None:
            continue
        requests.append(
            ActionRequest(
                id=getattr(tool_call, "id", None) or f"call_{idx}",
                name=getattr(function, "name", "") or "",
                arguments=_parse_arguments(getattr(function, "arguments", None)),
            )
        )
    if requests:
        return ActionRequestBatch(requests=tuple(requests), text=text)
    return TextReply(text=text)


def _parse_arguments(raw: object) -> dict[str, Any]:
    if isinstance(raw, dict):
        return dict(raw)
    if not isinstance(raw, str) or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("backend.arguments.invalid_json raw={!r}", raw[:200])
        return {}
    return parsed if isinstance(parsed, dict) else {}


class OpenAIGenerationBackend:
    """Chat-completions backend with function tools."""

    def __init__(self, client: AsyncOpenAI, *, model: str, temperature: float = 0.4) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, transcript: list[Turn], actions: list[dict[str, Any]]) -> GenerationResponse:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [turn_to_message(turn) for turn in transcript],
            "temperature": self._temperature,
        }
        if actions:
            kwargs["tools"] = actions
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except OpenAIError as exc:
            logger.exception("backend.call.error model={}", self._model)
            raise GenerationError(f"model_call_error: {exc!s}") from exc
        return decode_response(response)
