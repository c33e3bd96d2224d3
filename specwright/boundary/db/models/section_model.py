"""
Section answer and summary ORM models.

Both are keyed by (session_id, key) so every write is an upsert on that
pair and sections never interfere with each other.

Dependencies: sqlalchemy, specwright.boundary.db.base
System role: Per-section persistence
"""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from specwright.boundary.db.base import Base, TimestampMixin, UUIDMixin


class SectionAnswerModel(Base, UUIDMixin, TimestampMixin):
    """
    Saved answers for one section.

    Attributes:
        session_id: Owning session
        key: Section key (CONTEXT, OUTCOME, ...)
        qa: Ordered list of {question_id, question, answer}
        notes: Optional free-text notes
    """

    __tablename__ = "section_answers"
    __table_args__ = (UniqueConstraint("session_id", "key", name="uq_section_answers_session_key"),)

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(32), nullable=False)
    qa: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    session = relationship("SessionModel", back_populates="answers")


class SectionSummaryModel(Base, UUIDMixin, TimestampMixin):
    """
    Model-written summary of one section. Its presence marks the section complete.

    Attributes:
        session_id: Owning session
        key: Section key
        summary: 2-4 sentence summary text
    """

    __tablename__ = "section_summaries"
    __table_args__ = (UniqueConstraint("session_id", "key", name="uq_section_summaries_session_key"),)

    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    key: Mapped[str] = mapped_column(String(32), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)

    session = relationship("SessionModel", back_populates="summaries")
