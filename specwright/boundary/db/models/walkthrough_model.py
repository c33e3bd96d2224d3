"""
Tech walkthrough ORM models.

A walkthrough belongs to one session and owns its driver answers, its
architecture decisions and an optional agentic profile.

Dependencies: sqlalchemy, specwright.boundary.db.base
System role: Architecture walkthrough persistence
"""

from uuid import UUID

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from specwright.boundary.db.base import Base, TimestampMixin, UUIDMixin
from specwright.core.pipeline.workflow import DecisionStatus, WalkthroughStatus


class TechWalkthroughModel(Base, UUIDMixin, TimestampMixin):
    """
    Walkthrough header row, created lazily on first open.

    Attributes:
        session_id: Owning session (unique)
        status: in_progress | completed

    Relationships:
        drivers: One-to-many with ArchitectureDriverAnswerModel
        decisions: One-to-many with ArchitectureDecisionModel, ordered by sort_order
        agentic_profile: One-to-one with AgenticProfileModel
    """

    __tablename__ = "tech_walkthroughs"

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    status: Mapped[WalkthroughStatus] = mapped_column(
        Enum(WalkthroughStatus, native_enum=False),
        nullable=False,
        default=WalkthroughStatus.IN_PROGRESS,
    )

    session = relationship("SessionModel", back_populates="walkthrough")
    drivers = relationship(
        "ArchitectureDriverAnswerModel",
        back_populates="walkthrough",
        cascade="all, delete-orphan",
    )
    decisions = relationship(
        "ArchitectureDecisionModel",
        back_populates="walkthrough",
        cascade="all, delete-orphan",
        order_by="ArchitectureDecisionModel.sort_order",
    )
    agentic_profile = relationship(
        "AgenticProfileModel",
        back_populates="walkthrough",
        cascade="all, delete-orphan",
        uselist=False,
    )


class ArchitectureDriverAnswerModel(Base, UUIDMixin, TimestampMixin):
    """One answer per (walkthrough, driver question)."""

    __tablename__ = "architecture_driver_answers"
    __table_args__ = (
        UniqueConstraint("walkthrough_id", "question_key", name="uq_driver_answers_walkthrough_key"),
    )

    walkthrough_id: Mapped[UUID] = mapped_column(
        ForeignKey("tech_walkthroughs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_key: Mapped[str] = mapped_column(String(64), nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False, default="")

    walkthrough = relationship("TechWalkthroughModel", back_populates="drivers")


class ArchitectureDecisionModel(Base, UUIDMixin, TimestampMixin):
    """
    One proposed or edited architecture decision.

    The whole set is replaced on every propose call, so ids are not stable
    across proposals.
    """

    __tablename__ = "architecture_decisions"

    walkthrough_id: Mapped[UUID] = mapped_column(
        ForeignKey("tech_walkthroughs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    area: Mapped[str] = mapped_column(String(64), nullable=False)
    chosen_option: Mapped[str] = mapped_column(Text, nullable=False, default="")
    alternatives: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tradeoffs: Mapped[str] = mapped_column(Text, nullable=False, default="")
    user_visible_consequence: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mvp_impact: Mapped[str] = mapped_column(Text, nullable=False, default="")
    open_questions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[DecisionStatus] = mapped_column(
        Enum(DecisionStatus, native_enum=False),
        nullable=False,
        default=DecisionStatus.TENTATIVE,
    )

    walkthrough = relationship("TechWalkthroughModel", back_populates="decisions")


class AgenticProfileModel(Base, UUIDMixin, TimestampMixin):
    """How agentic the system under design is, one row per walkthrough."""

    __tablename__ = "agentic_profiles"

    walkthrough_id: Mapped[UUID] = mapped_column(
        ForeignKey("tech_walkthroughs.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    agentic_mode: Mapped[str] = mapped_column(String(32), nullable=False, default="none")
    orchestration_shape: Mapped[str | None] = mapped_column(String(64), nullable=True, default=None)
    tool_capabilities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    memory_requirements: Mapped[str | None] = mapped_column(String(32), nullable=True, default=None)
    human_approval_required: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    guardrails_notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    walkthrough = relationship("TechWalkthroughModel", back_populates="agentic_profile")
