from __future__ import annotations

from fastapi.testclient import TestClient

from careerdesk.api import create_app
from careerdesk.app import get_controller
from careerdesk.core.evaluator import Evaluation, Scores
from careerdesk.core.types import ReplyResult, RevisionAttempt


class FakeController:
    def __init__(self, *, fail: bool = False) -> None:
        self.messages: list[str] = []
        self._fail = fail

    async def handle_message(self, user_text: str) -> ReplyResult:
        self.messages.append(user_text)
        if self._fail:
            raise RuntimeError("backend unreachable")
        evaluation = Evaluation(Scores(9, 9, 9, 9, 9, 9), True, 0.9, "Good response")
        return ReplyResult("Hello!", 0.9, [RevisionAttempt(0, "Hello!", evaluation)])


def _client(controller: FakeController) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_controller] = lambda: controller
    return TestClient(app)


def test_chat_returns_reply_and_log() -> None:
    controller = FakeController()

    response = _client(controller).post("/api/chat", json={"message": "Hi"})

    assert response.status_code == 200
    body = response.json()
    assert body["reply"] == "Hello!"
    assert body["confidence"] == 0.9
    assert body["evaluation_log"][0]["revision"] == 0
    assert body["evaluation_log"][0]["scores"]["career_relevance"] == 9
    assert controller.messages == ["Hi"]


def test_chat_failure_maps_to_generic_500() -> None:
    response = _client(FakeController(fail=True)).post("/api/chat", json={"message": "Hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_blank_message_is_rejected() -> None:
    controller = FakeController()

    response = _client(controller).post("/api/chat", json={"message": "   "})

    assert response.status_code == 422
    assert controller.messages == []


def test_healthz() -> None:
    assert _client(FakeController()).get("/healthz").json() == {"status": "ok"}
