"""Built-in career assistant actions."""

from __future__ import annotations

from loguru import logger
from pydantic import BaseModel, Field

from careerdesk.actions.registry import ActionNotice, ActionRegistry


class RecordUserDetailsInput(BaseModel):
    """Employer contact shared during the conversation."""

    email: str = Field(..., description="Employer email address")
    name: str | None = Field(default=None, description="Employer name (optional)")


class RecordUnknownQuestionInput(BaseModel):
    """A question the assistant cannot answer from the profile."""

    question: str = Field(..., description="The question that needs human review")


class RecordInterviewRequestInput(BaseModel):
    """Interview or meeting proposal."""

    date: str = Field(..., description="Proposed date of the interview/meeting (ISO format preferred)")
    time: str = Field(..., description="Proposed time of the interview/meeting")
    mode: str = Field(..., description="Mode of meeting (e.g., Zoom, Google Meet, phone, in-person)")
    contact_email: str = Field(..., description="Contact email for the meeting")
    contact_phone: str | None = Field(default=None, description="Contact phone number (optional)")
    notes: str | None = Field(default=None, description="Any additional details provided by the employer (optional)")


def register_builtin_actions(registry: ActionRegistry) -> ActionRegistry:
    """Register contact capture, unknown-question escalation and interview logging."""

    @registry.action(
        name="record_user_details",
        description="Record employer contact details when they share an email.",
        input_model=RecordUserDetailsInput,
    )
    async def record_user_details(params: RecordUserDetailsInput) -> ActionNotice:
        logger.info("lead.captured email={} name={}", params.email, params.name)
        return ActionNotice(
            title="New Employer Contact",
            message=f"Name: {params.name or 'N/A'}\nEmail: {params.email}",
        )

    @registry.action(
        name="record_unknown_question",
        description="Log a question the assistant can't answer so the candidate can follow up personally.",
        input_model=RecordUnknownQuestionInput,
    )
    async def record_unknown_question(params: RecordUnknownQuestionInput) -> ActionNotice:
        logger.info("unknown.logged question={!r}", params.question)
        return ActionNotice(
            title="Human Intervention Needed",
            message=f'The assistant couldn\'t answer:\n"{params.question}"',
        )

    @registry.action(
        name="record_interview_request",
        description=(
            "Log an interview or meeting request, including proposed date/time, mode and contact info, "
            "and notify the candidate."
        ),
        input_model=RecordInterviewRequestInput,
    )
    async def record_interview_request(params: RecordInterviewRequestInput) -> ActionNotice:
        logger.info("interview.logged date={} time={} mode={}", params.date, params.time, params.mode)
        lines = [
            "New interview/meeting request received:",
            f"Date: {params.date}",
            f"Time: {params.time}",
            f"Mode: {params.mode}",
            f"Email: {params.contact_email}",
            f"Phone: {params.contact_phone or 'N/A'}",
            f"Notes: {params.notes or 'N/A'}",
        ]
        return ActionNotice(
            title="Interview Request",
            message="\n".join(lines),
            output="I noted the details. Thank you, I will follow up as needed.",
        )

    return registry
