"""Push notification sinks for action outcomes."""

from __future__ import annotations

import asyncio
import json
from typing import Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

from loguru import logger

PUSHOVER_API_URL = "https://api.pushover.net/1/messages.json"
USER_AGENT = "careerdesk-notify/1.0"


class Notifier(Protocol):
    async def send(self, title: str, message: str) -> bool: ...


class NullNotifier:
    """Sink used when no push service is configured."""

    async def send(self, title: str, message: str) -> bool:
        logger.info("notify.skipped title={} message={!r}", title, message)
        return False


class PushoverNotifier:
    """Fire-and-forget Pushover delivery.

    Delivery problems are logged and reported as ``False``; they never reach
    the caller as exceptions.
    """

    def __init__(self, token: str, user: str, *, timeout_seconds: float = 10.0, url: str = PUSHOVER_API_URL) -> None:
        self._token = token
        self._user = user
        self._timeout_seconds = timeout_seconds
        self._url = url

    async def send(self, title: str, message: str) -> bool:
        try:
            await asyncio.to_thread(self._post, title, message)
        except (urllib_error.URLError, OSError, ValueError) as exc:
            logger.error("notify.failed title={} error={}", title, exc)
            return False
        logger.info("notify.sent title={}", title)
        return True

    def _post(self, title: str, message: str) -> None:
        body = json.dumps(
            {"token": self._token, "user": self._user, "title": title, "message": message},
            ensure_ascii=False,
        ).encode("utf-8")
        request = urllib_request.Request(  # noqa: S310 - fixed https endpoint.
            self._url,
            data=body,
            method="POST",
            headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
        )
        with urllib_request.urlopen(request, timeout=self._timeout_seconds) as response:  # noqa: S310
            status = getattr(response, "status", 200)
            if status >= 400:
                detail = response.read().decode("utf-8", errors="replace")
                raise ValueError(f"pushover status={status} body={detail}")


def build_notifier(token: str | None, user: str | None, *, timeout_seconds: float = 10.0) -> Notifier:
    if token and user:
        return PushoverNotifier(token, user, timeout_seconds=timeout_seconds)
    logger.warning("notify.disabled reason=missing pushover token or user")
    return NullNotifier()
