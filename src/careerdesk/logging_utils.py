"""Runtime logging helpers."""

from __future__ import annotations

import os
import sys
from contextvars import ContextVar
from logging import Handler
from typing import Literal

import loguru
from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "chat"]

_DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level:<6} | {name}:{function}:{line} | {extra[request]} | {message}"
)
_CONFIGURED_PROFILE: LogProfile | None = None

_request_context: ContextVar[str] = ContextVar("request", default="-")


def current_request() -> str:
    """Get the id of the message being handled in this context."""
    return _request_context.get()


def bind_request(request_id: str) -> object:
    """Mark the current context as handling one inbound message."""
    return _request_context.set(request_id)


def release_request(token: object) -> None:
    _request_context.reset(token)  # type: ignore[arg-type]


def _build_chat_handler() -> Handler:
    return RichHandler(
        console=get_console(),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def configure_logging(*, profile: LogProfile = "default", level: str | None = None) -> None:
    """Configure process-level logging once."""

    def inject_context(record: loguru.Record) -> None:
        record["extra"]["request"] = current_request()

    global _CONFIGURED_PROFILE
    if profile == _CONFIGURED_PROFILE:
        return

    resolved_level = (level or os.getenv("CAREERDESK_LOG_LEVEL", "INFO")).upper()
    logger.remove()
    if profile == "chat":
        logger.add(
            _build_chat_handler(),
            level=resolved_level,
            format="{message}",
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            level=resolved_level,
            format=_DEFAULT_FORMAT,
            backtrace=False,
            diagnose=False,
        )
        logger.configure(patcher=inject_context)
    _CONFIGURED_PROFILE = profile
