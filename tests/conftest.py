from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CAREERDESK_API_KEY", "CAREERDESK_MODEL", "CAREERDESK_PUSHOVER_TOKEN", "CAREERDESK_PUSHOVER_USER"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
