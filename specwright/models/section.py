"""
Section domain models and schemas.

Request/response schemas for saving, suggesting on, summarizing and
prefilling guided sections.

Dependencies: pydantic
System role: Section API contracts
"""

import uuid
from typing import Literal

from pydantic import BaseModel, Field

from specwright.core.content import ProjectScope, SectionKey
from specwright.models.common import RequestModel


class QAItem(RequestModel):
    """One answered question."""

    question_id: str
    question: str
    answer: str


class SaveSectionRequest(RequestModel):
    """Request schema for saving one section's answers."""

    key: SectionKey
    qa: list[QAItem]
    notes: str | None = None


class SuggestRequest(RequestModel):
    session_id: uuid.UUID
    key: SectionKey
    current_text: str


class Suggestion(BaseModel):
    id: str
    type: Literal["risk", "tradeoff", "question", "example"]
    text: str


class SuggestResponse(BaseModel):
    suggestions: list[Suggestion]


class SummarizeRequest(RequestModel):
    session_id: uuid.UUID
    key: SectionKey


class SummaryResponse(BaseModel):
    summary: str


class PrefillRequest(RequestModel):
    """Request schema for drafting answers from a free-text description."""

    description: str = Field(min_length=10, description="Product description, at least 10 characters")
    session_id: uuid.UUID | None = Field(
        default=None,
        description="When set, drafted answers are saved to this session",
    )
    project_scope: ProjectScope | None = None


class PrefillSectionAnswers(BaseModel):
    qa: list[QAItem]


class PrefillResponse(BaseModel):
    answers: dict[str, PrefillSectionAnswers]
