"""
Session ORM model.

A session is one user's pass through the guided sections. It owns the
section answers, summaries, generated artifacts and at most one tech
walkthrough.

Dependencies: sqlalchemy, specwright.boundary.db.base
System role: Session persistence for the specification workflow
"""

from datetime import datetime

from sqlalchemy import DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from specwright.boundary.db.base import Base, TimestampMixin, UUIDMixin
from specwright.core.content import ProjectScope


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Session ORM model.

    Expiry is advisory: rows are never hard-deleted, reads on the section
    mutation path and the session fetch reject expired sessions.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Optional product title used in artifact titles and prompts
        product_description: Free-text description captured at creation or prefill
        project_scope: personal | mvp | production
        active_key: Section the user was last editing
        expires_at: Point after which the session is treated as expired

    Relationships:
        answers: One-to-many with SectionAnswerModel (cascade delete)
        summaries: One-to-many with SectionSummaryModel (cascade delete)
        artifacts: One-to-many with ArtifactModel (cascade delete)
        walkthrough: One-to-one with TechWalkthroughModel (cascade delete)
    """

    __tablename__ = "sessions"

    title: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    product_description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    project_scope: Mapped[ProjectScope | None] = mapped_column(
        Enum(ProjectScope, native_enum=False),
        nullable=True,
        default=None,
    )
    active_key: Mapped[str] = mapped_column(String(32), nullable=False, default="CONTEXT")
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    answers = relationship(
        "SectionAnswerModel",
        back_populates="session",
        cascade="all, delete-orphan",
    )
    summaries = relationship(
        "SectionSummaryModel",
        back_populates="session",
        cascade="all, delete-orphan",
    )
    artifacts = relationship(
        "ArtifactModel",
        back_populates="session",
        cascade="all, delete-orphan",
    )
    walkthrough = relationship(
        "TechWalkthroughModel",
        back_populates="session",
        cascade="all, delete-orphan",
        uselist=False,
    )
