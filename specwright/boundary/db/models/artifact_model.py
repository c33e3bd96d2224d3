"""
Artifact ORM model.

Generated documents. The primary key is derived from the session and the
artifact type, so there is exactly one row per (session, type) and every
regeneration overwrites it.

Dependencies: sqlalchemy, specwright.boundary.db.base
System role: Generated document persistence
"""

from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from specwright.boundary.db.base import Base, TimestampMixin
from specwright.core.pipeline.workflow import ArtifactType


class ArtifactModel(Base, TimestampMixin):
    """
    Generated PRD or tech spec.

    Attributes:
        id: "{session_id}-{type}"
        session_id: Owning session
        type: PRD | TECH_SPEC
        title: "PRD - <title>" or "Tech Spec - <title>"
        content_md: Markdown body
    """

    __tablename__ = "artifacts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[ArtifactType] = mapped_column(Enum(ArtifactType, native_enum=False), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content_md: Mapped[str] = mapped_column(Text, nullable=False)

    session = relationship("SessionModel", back_populates="artifacts")
