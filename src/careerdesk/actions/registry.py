"""Action registry."""

from __future__ import annotations

import asyncio
import builtins
import json
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError
from republic import Tool, tool_from_model

from careerdesk.core.types import ActionRequest, ActionResult
from careerdesk.notify import Notifier, NullNotifier


def _shorten_text(text: str, width: int = 30, placeholder: str = "...") -> str:
    """Clip a rendered parameter value for log lines."""
    if len(text) <= width:
        return text

    available = width - len(placeholder)
    if available <= 0:
        return placeholder

    return text[:available] + placeholder


@dataclass(frozen=True)
class ActionNotice:
    """What a handler wants the owner and the model to know."""

    title: str
    message: str
    output: str = ""


ActionHandler = Callable[[Any], Awaitable[ActionNotice]]


@dataclass(frozen=True)
class ActionDescriptor:
    """Action metadata and runtime handle."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ActionHandler
    tool: Tool


class ActionRegistry:
    """Registry of side-effecting actions the assistant may request."""

    def __init__(self, notifier: Notifier | None = None) -> None:
        self._actions: dict[str, ActionDescriptor] = {}
        self._notifier = notifier or NullNotifier()

    def register(self, descriptor: ActionDescriptor) -> None:
        if descriptor.name in self._actions:
            raise ValueError(f"Duplicate action name: {descriptor.name}")
        self._actions[descriptor.name] = descriptor

    def action(
        self, *, name: str, description: str, input_model: type[BaseModel]
    ) -> Callable[[ActionHandler], ActionHandler]:
        """Decorator form of ``register``."""

        def decorator(handler: ActionHandler) -> ActionHandler:
            self.register(
                ActionDescriptor(
                    name=name,
                    description=description,
                    input_model=input_model,
                    handler=handler,
                    tool=tool_from_model(input_model, handler, name=name, description=description),
                )
            )
            return handler

        return decorator

    def has(self, name: str) -> bool:
        return name in self._actions

    def get(self, name: str) -> ActionDescriptor | None:
        return self._actions.get(name)

    def descriptors(self) -> builtins.list[ActionDescriptor]:
        return sorted(self._actions.values(), key=lambda item: item.name)

    def schemas(self) -> builtins.list[dict[str, Any]]:
        """Function schemas handed to the generation backend."""
        return [descriptor.tool.schema() for descriptor in self.descriptors()]

    async def dispatch_all(self, requests: Iterable[ActionRequest]) -> builtins.list[ActionResult]:
        """Dispatch one round of requests; results keep request order."""
        return list(await asyncio.gather(*(self.dispatch(request) for request in requests)))

    async def dispatch(self, request: ActionRequest) -> ActionResult:
        descriptor = self.get(request.name)
        if descriptor is None:
            logger.warning("action.unknown name={} id={}", request.name, request.id)
            return ActionResult(
                request_id=request.id,
                name=request.name,
                success=False,
                error=f"unknown action: {request.name}",
            )

        start = time.monotonic()
        result = await self._run(descriptor, request)
        duration = time.monotonic() - start
        logger.info(
            "action.dispatch name={} id={} ok={} duration={:.3f}ms {{ {} }}",
            request.name,
            request.id,
            result.success,
            duration * 1000,
            self._render_params(request.arguments),
        )
        return result

    async def _run(self, descriptor: ActionDescriptor, request: ActionRequest) -> ActionResult:
        try:
            params = descriptor.input_model.model_validate(request.arguments)
        except ValidationError as exc:
            error = _format_validation_error(exc)
            await self._notify(f"Action Failed: {descriptor.name}", error)
            return ActionResult(request_id=request.id, name=descriptor.name, success=False, error=error)

        try:
            notice = await descriptor.handler(params)
        except Exception as exc:
            logger.exception("action.error name={}", descriptor.name)
            await self._notify(f"Action Failed: {descriptor.name}", f"{exc!s}")
            return ActionResult(request_id=request.id, name=descriptor.name, success=False, error=f"{exc!s}")

        await self._notify(notice.title, notice.message)
        return ActionResult(request_id=request.id, name=descriptor.name, success=True, output=notice.output)

    async def _notify(self, title: str, message: str) -> None:
        try:
            await self._notifier.send(title, message)
        except Exception:
            logger.exception("notify.error title={}", title)

    @staticmethod
    def _render_params(arguments: dict[str, Any]) -> str:
        params: list[str] = []
        for key, value in arguments.items():
            try:
                rendered = json.dumps(value, ensure_ascii=False)
            except TypeError:
                rendered = repr(value)
            value = _shorten_text(rendered, width=30, placeholder="...")
            if value.startswith('"') and not value.endswith('"'):
                value = value + '"'
            params.append(f"{key}={value}")
        return ", ".join(params)


def _format_validation_error(exc: ValidationError) -> str:
    problems: list[str] = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "arguments"
        problems.append(f"{location}: {item.get('msg', 'invalid')}")
    return "invalid arguments: " + "; ".join(problems)
