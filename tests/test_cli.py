from __future__ import annotations

import json
from typing import Any

from typer.testing import CliRunner

from careerdesk.cli import app
from careerdesk.core.types import ReplyResult

runner = CliRunner()


class FakeController:
    async def handle_message(self, user_text: str) -> ReplyResult:
        return ReplyResult(reply=f"echo: {user_text}", confidence=0.8)


def test_ask_prints_json(monkeypatch) -> None:
    monkeypatch.setattr("careerdesk.cli.build_controller", lambda settings: FakeController())
    monkeypatch.setattr("careerdesk.cli.configure_logging", lambda **kwargs: None)

    result = runner.invoke(app, ["ask", "Hello", "--json"])

    assert result.exit_code == 0
    payload: dict[str, Any] = json.loads(result.stdout)
    assert payload == {"reply": "echo: Hello", "confidence": 0.8, "evaluation_log": []}


def test_ask_reports_configuration_errors(monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr("careerdesk.cli.configure_logging", lambda **kwargs: None)

    result = runner.invoke(app, ["ask", "Hello"])

    assert result.exit_code == 1


def test_ask_configures_logging_with_settings_level(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setenv("CAREERDESK_LOG_LEVEL", "DEBUG")
    monkeypatch.setattr("careerdesk.cli.build_controller", lambda settings: FakeController())
    monkeypatch.setattr("careerdesk.cli.configure_logging", lambda **kwargs: calls.append(kwargs))

    result = runner.invoke(app, ["ask", "Hello"])

    assert result.exit_code == 0
    assert calls == [{"level": "DEBUG"}]
