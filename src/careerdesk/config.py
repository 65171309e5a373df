"""Configuration management for careerdesk."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from careerdesk.errors import ApiKeyNotConfiguredError, ModelNotConfiguredError

DEFAULT_MODEL = "gpt-4o-mini"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CAREERDESK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Model configuration
    model: str = Field(default=DEFAULT_MODEL, description="Chat model used to draft replies")
    evaluator_model: str | None = Field(default=None, description="Model used to judge replies, defaults to model")
    api_key: str | None = Field(default=None, description="API key for the LLM provider")
    api_base: str | None = Field(default=None, description="Optional API base URL")
    temperature: float = Field(default=0.4, ge=0.0, le=2.0)
    request_timeout_seconds: float | None = Field(default=60.0, description="Per-request model timeout")

    # Reply loop
    max_revisions: int = Field(default=3, ge=1, description="Rejected candidates allowed before giving up")
    max_action_rounds: int = Field(default=8, ge=1, description="Consecutive action rounds before forcing text")
    score_floor: float = Field(default=5.0, description="Minimum score required on every criterion")
    acceptance_threshold: float = Field(default=5.0, description="Minimum mean score across criteria")
    relevance_floor: float = Field(default=2.0, description="Career relevance below this is out of scope")

    # Persona
    context_dir: Path = Field(default=Path("me"), description="Directory holding persona documents")
    system_prompt: str | None = Field(default=None, description="Override for the persona prompt template")

    # Notifications
    pushover_token: str | None = Field(default=None, description="Pushover application token")
    pushover_user: str | None = Field(default=None, description="Pushover user key")
    notify_timeout_seconds: float = Field(default=10.0, gt=0)

    log_level: str = Field(default="INFO", description="Log level")

    @property
    def resolved_api_key(self) -> str:
        key = self.api_key or os.getenv("OPENAI_API_KEY")
        if not key:
            raise ApiKeyNotConfiguredError("API key not configured. Set CAREERDESK_API_KEY or OPENAI_API_KEY.")
        return key

    @property
    def resolved_evaluator_model(self) -> str:
        return self.evaluator_model or self.model


def load_settings(context_dir: Path | None = None) -> Settings:
    """Load settings from the environment and `.env`.

    Args:
        context_dir: Optional persona directory override

    Returns:
        Settings instance
    """
    settings = Settings()
    if context_dir is not None:
        settings = settings.model_copy(update={"context_dir": context_dir})
    if not settings.model.strip():
        raise ModelNotConfiguredError("Model not configured. Set CAREERDESK_MODEL (e.g., 'gpt-4o-mini').")
    return settings
