"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - SessionModel, SectionAnswerModel, SectionSummaryModel, ArtifactModel: Main flow entities
  - TechWalkthroughModel and children: Walkthrough entities
  - session_crud, section_crud, artifact_crud, walkthrough_crud: CRUD operation singletons

Dependencies: sqlalchemy, specwright.configs
System role: Database adapter providing persistent storage for sessions,
section answers, generated artifacts and architecture walkthroughs.
"""

from specwright.boundary.db.base import Base, TimestampMixin, UUIDMixin, as_utc, utcnow
from specwright.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from specwright.boundary.db.models import (
    AgenticProfileModel,
    ArchitectureDecisionModel,
    ArchitectureDriverAnswerModel,
    ArtifactModel,
    SectionAnswerModel,
    SectionSummaryModel,
    SessionModel,
    TechWalkthroughModel,
)
from specwright.boundary.db.CRUD import (
    BaseCRUD,
    ArtifactCRUD,
    SectionCRUD,
    SessionCRUD,
    WalkthroughCRUD,
    artifact_crud,
    section_crud,
    session_crud,
    walkthrough_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "as_utc",
    "utcnow",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "SessionModel",
    "SectionAnswerModel",
    "SectionSummaryModel",
    "ArtifactModel",
    "TechWalkthroughModel",
    "ArchitectureDriverAnswerModel",
    "ArchitectureDecisionModel",
    "AgenticProfileModel",
    # CRUD classes
    "BaseCRUD",
    "SessionCRUD",
    "SectionCRUD",
    "ArtifactCRUD",
    "WalkthroughCRUD",
    # CRUD singletons
    "session_crud",
    "section_crud",
    "artifact_crud",
    "walkthrough_crud",
]
