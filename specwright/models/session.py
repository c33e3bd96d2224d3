"""
Session domain models and schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from specwright.core.content import ProjectScope, SectionKey
from specwright.core.pipeline import ArtifactType, MainFlowState
from specwright.models.common import RequestModel
from specwright.models.section import QAItem


class CreateSessionRequest(RequestModel):
    """Request schema for creating a new session."""

    title: str | None = Field(default=None, max_length=255)
    product_description: str | None = None
    project_scope: ProjectScope | None = None


class UpdateSessionRequest(RequestModel):
    """Partial update of session metadata; omitted fields are left unchanged."""

    title: str | None = Field(default=None, max_length=255)
    product_description: str | None = None
    project_scope: ProjectScope | None = None
    active_key: SectionKey | None = None


class SessionCreatedResponse(BaseModel):
    session_id: uuid.UUID
    expires_at: datetime
    active_key: str


class SectionAnswerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    qa: list[QAItem]
    notes: str | None = None
    updated_at: datetime


class SectionSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    summary: str
    updated_at: datetime


class ArtifactResponse(BaseModel):
    """Response schema for a generated document."""

    model_config = ConfigDict(from_attributes=True)

    type: ArtifactType
    title: str
    content_md: str


class StoredArtifactResponse(ArtifactResponse):
    id: str
    updated_at: datetime


class SessionDetailResponse(BaseModel):
    """Session with everything it owns."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str | None
    product_description: str | None
    project_scope: ProjectScope | None
    active_key: str
    expires_at: datetime
    created_at: datetime
    updated_at: datetime
    sections: list[SectionAnswerResponse]
    summaries: list[SectionSummaryResponse]
    artifacts: list[StoredArtifactResponse]


class ProgressResponse(BaseModel):
    """Derived workflow position of a session."""

    session_id: uuid.UUID
    state: MainFlowState
    completed_sections: list[str]
    total_sections: int
    artifacts: list[ArtifactType]
    unlocked_stages: list[str]
    has_walkthrough: bool
