"""HTTP boundary for the reply loop."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from careerdesk.app import get_controller
from careerdesk.core.controller import ReplyController


class ChatRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(..., min_length=1, description="Employer message")


class EvaluationLogEntry(BaseModel):
    revision: int
    is_acceptable: bool
    feedback: str
    confidence: float
    scores: dict[str, float]


class ChatResponse(BaseModel):
    reply: str
    confidence: float = Field(ge=0.0, le=1.0)
    evaluation_log: list[EvaluationLogEntry] = Field(default_factory=list)


def create_app() -> FastAPI:
    app = FastAPI(title="careerdesk")

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest, controller: ReplyController = Depends(get_controller)) -> Any:  # noqa: B008
        try:
            result = await controller.handle_message(request.message)
        except Exception:
            logger.exception("api.chat.error")
            return JSONResponse(status_code=500, content={"error": "Internal server error"})
        return result.to_dict()

    return app
