"""
Generation domain models and schemas.

Request/response schemas for document generation, reflection,
refinement and the idea explorer.

Dependencies: pydantic
System role: Generation API contracts
"""

import uuid

from pydantic import BaseModel, Field

from specwright.core.pipeline import ArtifactType
from specwright.models.common import RequestModel
from specwright.models.session import ArtifactResponse


class GenerateRequest(RequestModel):
    """Request schema for PRD, tech spec and reflection generation."""

    session_id: uuid.UUID


class ArtifactResult(BaseModel):
    artifact: ArtifactResponse


class ReflectionResponse(BaseModel):
    content: str


class RefineRequest(RequestModel):
    """Request schema for one refinement chat turn."""

    session_id: uuid.UUID
    message: str = Field(min_length=1)
    artifact_type: ArtifactType


class IdeaQuestionItem(RequestModel):
    label: str
    question: str
    answer: str


class IdeaExplorerRequest(RequestModel):
    question_set_id: str
    questions: list[IdeaQuestionItem] = Field(min_length=3, max_length=3)


class Idea(BaseModel):
    title: str
    one_liner: str
    description_to_paste: str


class IdeasResponse(BaseModel):
    ideas: list[Idea]
