import pytest
from pydantic import BaseModel

from careerdesk.actions.builtin import register_builtin_actions
from careerdesk.actions.registry import ActionNotice, ActionRegistry
from careerdesk.core.types import ActionRequest


class RecordingNotifier:
    def __init__(self, *, fail: bool = False) -> None:
        self.sent: list[tuple[str, str]] = []
        self._fail = fail

    async def send(self, title: str, message: str) -> bool:
        self.sent.append((title, message))
        if self._fail:
            raise RuntimeError("push service down")
        return True


def _registry(notifier: RecordingNotifier) -> ActionRegistry:
    return register_builtin_actions(ActionRegistry(notifier))


def test_schemas_declare_builtin_actions() -> None:
    schemas = _registry(RecordingNotifier()).schemas()

    functions = {schema["function"]["name"]: schema["function"] for schema in schemas}
    assert sorted(functions) == ["record_interview_request", "record_unknown_question", "record_user_details"]
    assert "email" in functions["record_user_details"]["parameters"]["required"]
    assert "name" not in functions["record_user_details"]["parameters"].get("required", [])


def test_duplicate_action_name_raises() -> None:
    registry = _registry(RecordingNotifier())

    with pytest.raises(ValueError, match="Duplicate action name"):
        register_builtin_actions(registry)


@pytest.mark.asyncio
async def test_unknown_action_is_logged_noop(monkeypatch) -> None:
    warnings: list[str] = []

    def _capture(message: str, *args: object) -> None:
        warnings.append(message)

    monkeypatch.setattr("careerdesk.actions.registry.logger.warning", _capture)
    notifier = RecordingNotifier()
    registry = _registry(notifier)

    result = await registry.dispatch(ActionRequest(id="call_1", name="book_flight", arguments={"to": "SFO"}))

    assert result.success is False
    assert result.request_id == "call_1"
    assert "unknown action" in (result.error or "")
    assert warnings == ["action.unknown name={} id={}"]
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_missing_required_argument_fails_only_that_action() -> None:
    notifier = RecordingNotifier()
    registry = _registry(notifier)

    results = await registry.dispatch_all(
        [
            ActionRequest(id="a", name="record_user_details", arguments={"name": "Dana"}),
            ActionRequest(id="b", name="record_unknown_question", arguments={"question": "Visa sponsorship?"}),
        ]
    )

    assert [result.request_id for result in results] == ["a", "b"]
    assert results[0].success is False
    assert "email" in (results[0].error or "")
    assert results[1].success is True
    assert [title for title, _ in notifier.sent] == ["Action Failed: record_user_details", "Human Intervention Needed"]


@pytest.mark.asyncio
async def test_each_dispatched_action_notifies_once() -> None:
    notifier = RecordingNotifier()
    registry = _registry(notifier)

    result = await registry.dispatch(
        ActionRequest(id="c", name="record_user_details", arguments={"email": "hr@example.com", "name": "Dana"})
    )

    assert result.success is True
    assert notifier.sent == [("New Employer Contact", "Name: Dana\nEmail: hr@example.com")]


@pytest.mark.asyncio
async def test_interview_request_returns_output_for_model() -> None:
    notifier = RecordingNotifier()
    registry = _registry(notifier)

    result = await registry.dispatch(
        ActionRequest(
            id="d",
            name="record_interview_request",
            arguments={"date": "2026-11-02", "time": "10:00", "mode": "Zoom", "contact_email": "hr@example.com"},
        )
    )

    assert result.success is True
    assert result.output.startswith("I noted the details")
    title, message = notifier.sent[0]
    assert title == "Interview Request"
    assert "Phone: N/A" in message
    assert '"success": true' in result.to_content()


@pytest.mark.asyncio
async def test_handler_exception_is_isolated() -> None:
    class EchoInput(BaseModel):
        value: str

    notifier = RecordingNotifier()
    registry = ActionRegistry(notifier)

    @registry.action(name="explode", description="always fails", input_model=EchoInput)
    async def explode(params: EchoInput) -> ActionNotice:
        raise RuntimeError(f"boom {params.value}")

    result = await registry.dispatch(ActionRequest(id="e", name="explode", arguments={"value": "x"}))

    assert result.success is False
    assert result.error == "boom x"
    assert notifier.sent == [("Action Failed: explode", "boom x")]


@pytest.mark.asyncio
async def test_notifier_failure_does_not_fail_action() -> None:
    registry = _registry(RecordingNotifier(fail=True))

    result = await registry.dispatch(
        ActionRequest(id="f", name="record_unknown_question", arguments={"question": "Salary?"})
    )

    assert result.success is True


@pytest.mark.asyncio
async def test_dispatch_log_clips_long_parameters(monkeypatch) -> None:
    records: list[tuple[str, tuple[object, ...]]] = []

    def _capture(message: str, *args: object) -> None:
        records.append((message, args))

    monkeypatch.setattr("careerdesk.actions.registry.logger.info", _capture)
    registry = _registry(RecordingNotifier())
    question = "What is your expected salary range for a senior role in Berlin?"

    await registry.dispatch(ActionRequest(id="q1", name="record_unknown_question", arguments={"question": question}))

    dispatch_args = next(args for message, args in records if message.startswith("action.dispatch"))
    assert dispatch_args[-1] == 'question="What is your expected sala..."'
