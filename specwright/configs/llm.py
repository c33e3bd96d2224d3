"""
LLM provider configuration.

OpenAI-compatible endpoint settings (OpenRouter by default) and the model
assigned to each generation stage.

Dependencies: pydantic_settings
System role: Model routing and transport policy for the completion client
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from specwright.configs.base import BaseSettings

DEFAULT_MODEL = "anthropic/claude-3.5-sonnet"


class LLMSettings(BaseSettings):
    """Provider credentials, per-stage models and call policy."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPENROUTER_",
        protected_namespaces=(),
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Provider API key")
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible base URL",
    )
    app_url: str = Field(
        default="http://localhost:3000",
        description="Sent as HTTP-Referer for provider attribution",
    )
    app_name: str = Field(default="Specwright", description="Sent as X-Title")

    model_suggest: str = Field(default=DEFAULT_MODEL)
    model_summary: str = Field(default=DEFAULT_MODEL)
    model_generate: str = Field(default=DEFAULT_MODEL)
    model_reflect: str = Field(default="google/gemini-3-pro-preview")
    model_refine: str | None = Field(
        default=None,
        description="Falls back to model_generate when unset",
    )
    model_idea_explorer: str | None = Field(
        default=None,
        description="Falls back to model_suggest when unset",
    )

    temperature: float = Field(default=0.7)
    request_timeout_seconds: float = Field(default=120.0)
    max_retries: int = Field(default=0, description="Retries on transient upstream errors")
    prefill_timeout_seconds: float = Field(
        default=120.0,
        description="Abort window for the answer prefill stage",
    )

    @property
    def refine_model(self) -> str:
        return self.model_refine or self.model_generate

    @property
    def idea_explorer_model(self) -> str:
        return self.model_idea_explorer or self.model_suggest
