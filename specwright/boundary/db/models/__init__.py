"""
Database models package.

Exports:
  - SessionModel: Session ORM model
  - SectionAnswerModel, SectionSummaryModel: Per-section answers and summaries
  - ArtifactModel: Generated PRD / tech spec documents
  - TechWalkthroughModel and its children: Architecture walkthrough records

Dependencies: sqlalchemy, specwright.boundary.db.base
System role: Database model definitions for domain entities
"""

from specwright.boundary.db.models.session_model import SessionModel
from specwright.boundary.db.models.section_model import SectionAnswerModel, SectionSummaryModel
from specwright.boundary.db.models.artifact_model import ArtifactModel
from specwright.boundary.db.models.walkthrough_model import (
    AgenticProfileModel,
    ArchitectureDecisionModel,
    ArchitectureDriverAnswerModel,
    TechWalkthroughModel,
)

__all__ = [
    "SessionModel",
    "SectionAnswerModel",
    "SectionSummaryModel",
    "ArtifactModel",
    "TechWalkthroughModel",
    "ArchitectureDriverAnswerModel",
    "ArchitectureDecisionModel",
    "AgenticProfileModel",
]
