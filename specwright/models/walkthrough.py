"""
Tech walkthrough domain models and schemas.

Request/response schemas for drivers, agentic profile, decisions,
spec and diagram generation.

Dependencies: pydantic
System role: Walkthrough API contracts
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from specwright.core.pipeline import DecisionStatus, WalkthroughStatus
from specwright.models.common import RequestModel


class OpenWalkthroughRequest(RequestModel):
    session_id: uuid.UUID


class DriverAnswer(RequestModel):
    model_config = ConfigDict(from_attributes=True)

    question_key: str
    answer: str


class SaveDriversRequest(RequestModel):
    walkthrough_id: uuid.UUID
    drivers: list[DriverAnswer]


class SavedCountResponse(BaseModel):
    saved: int


class AgenticProfile(RequestModel):
    """Agentic profile as sent and returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    agentic_mode: str = "none"
    orchestration_shape: str | None = None
    tool_capabilities: list[str] = Field(default_factory=list)
    memory_requirements: str | None = None
    human_approval_required: list[str] = Field(default_factory=list)
    guardrails_notes: str | None = None


class SaveAgenticProfileRequest(AgenticProfile):
    walkthrough_id: uuid.UUID


class Decision(RequestModel):
    """One architecture decision as returned to and echoed back by clients."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID | str | None = None
    title: str
    area: str
    chosen_option: str
    alternatives: list[str] = Field(default_factory=list)
    tradeoffs: str = ""
    user_visible_consequence: str = ""
    mvp_impact: str = ""
    open_questions: str = ""
    status: str = DecisionStatus.TENTATIVE.value


class DecisionUpdates(RequestModel):
    title: str | None = None
    area: str | None = None
    chosen_option: str | None = None
    alternatives: list[str] | None = None
    tradeoffs: str | None = None
    user_visible_consequence: str | None = None
    mvp_impact: str | None = None
    open_questions: str | None = None
    status: DecisionStatus | None = None


class UpdateDecisionRequest(RequestModel):
    decision_id: uuid.UUID
    updates: DecisionUpdates


class DecisionIdResponse(BaseModel):
    id: uuid.UUID


class WalkthroughResponse(BaseModel):
    """Walkthrough with its drivers, ordered decisions and profile."""

    id: uuid.UUID
    session_id: uuid.UUID
    status: WalkthroughStatus
    drivers: list[DriverAnswer]
    decisions: list[Decision]
    agentic_profile: AgenticProfile | None = None


class ProposeDecisionsRequest(RequestModel):
    walkthrough_id: uuid.UUID
    prd_content: str
    drivers: dict[str, str]
    agentic_profile: AgenticProfile | None = None


class DecisionsResponse(BaseModel):
    decisions: list[Decision]


class GenerateSpecRequest(RequestModel):
    """Spec from the current decision snapshot; stored decisions are used when none are sent."""

    walkthrough_id: uuid.UUID
    session_id: uuid.UUID
    prd_content: str
    drivers: dict[str, str]
    decisions: list[Decision] | None = None


class SpecResponse(BaseModel):
    spec: str


class GenerateDiagramRequest(RequestModel):
    prd_content: str
    drivers: dict[str, str] = Field(default_factory=dict)
    decisions: list[Decision] = Field(default_factory=list)


class DiagramResponse(BaseModel):
    diagram: str


class WalkthroughPrefillRequest(RequestModel):
    prd_content: str = Field(min_length=10)


class WalkthroughPrefillResponse(BaseModel):
    answers: dict[str, str]
    agentic_profile: AgenticProfile | None = None


class DriverSuggestRequest(RequestModel):
    prd_content: str
    question_key: str
    current_answer: str = ""


class DriverSuggestResponse(BaseModel):
    suggestions: list[str]
