"""
Schemas for structured model output.

Models answer in loosely-shaped JSON with camelCase keys. These pydantic
models are the strict second phase: they validate and coerce the loose
payload into typed values, and they accept either camelCase or snake_case
keys.

Dependencies: pydantic
System role: Typed contracts for JSON-producing stages
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from specwright.core.content.sections import get_section


class LLMOutputModel(BaseModel):
    """Base for model-produced payloads: camelCase aliases, extra keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


SuggestionType = Literal["risk", "tradeoff", "question", "example"]


class SuggestionItem(LLMOutputModel):
    type: SuggestionType = "example"
    text: str

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_example(cls, value: object) -> object:
        if value not in ("risk", "tradeoff", "question", "example"):
            return "example"
        return value


class PrefillQAItem(LLMOutputModel):
    question_id: str = ""
    question: str = ""
    answer: str = ""


class PrefillSection(LLMOutputModel):
    qa: list[PrefillQAItem] = Field(default_factory=list)


class PrefillPayload(LLMOutputModel):
    answers: dict[str, PrefillSection]

    @model_validator(mode="after")
    def _fill_question_ids(self) -> "PrefillPayload":
        """Missing ids take the catalogue id at the same position; items left without one are dropped."""
        for key, section in self.answers.items():
            try:
                catalogue = [question.id for question in get_section(key).questions]
            except (KeyError, ValueError):
                catalogue = []
            for index, item in enumerate(section.qa):
                if not item.question_id and index < len(catalogue):
                    item.question_id = catalogue[index]
            section.qa = [item for item in section.qa if item.question_id]
        return self


class ProposedDecision(LLMOutputModel):
    title: str
    area: str
    chosen_option: str
    alternatives: list[str] = Field(default_factory=list)
    tradeoffs: str = ""
    user_visible_consequence: str = ""
    mvp_impact: str = ""
    open_questions: str = ""

    @field_validator("tradeoffs", "user_visible_consequence", "mvp_impact", "open_questions", mode="before")
    @classmethod
    def _null_is_empty(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, list):
            return "\n".join(str(item) for item in value)
        return value

    @field_validator("alternatives", mode="before")
    @classmethod
    def _alternatives_list(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class IdeaSuggestion(LLMOutputModel):
    title: str
    one_liner: str
    description_to_paste: str


class AgenticProfilePayload(LLMOutputModel):
    agentic_mode: str = "none"
    orchestration_shape: str | None = None
    tool_capabilities: list[str] = Field(default_factory=list)
    memory_requirements: str | None = None
    human_approval_required: list[str] = Field(default_factory=list)
    guardrails_notes: str | None = None

    @field_validator("orchestration_shape", "memory_requirements", mode="before")
    @classmethod
    def _null_string(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().lower() in ("", "null"):
            return None
        return value


class WalkthroughPrefillPayload(LLMOutputModel):
    drivers: dict[str, str] = Field(default_factory=dict)
    agentic_profile: AgenticProfilePayload | None = None

    @field_validator("drivers", mode="before")
    @classmethod
    def _stringify_answers(cls, value: object) -> object:
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value
