"""
Artifact CRUD operations.

Dependencies: sqlalchemy, specwright.boundary.db.models
System role: Generated document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from specwright.boundary.db.models import ArtifactModel
from specwright.boundary.db.CRUD.base_crud import BaseCRUD
from specwright.core.pipeline.workflow import ArtifactType, artifact_id


class ArtifactCRUD(BaseCRUD[ArtifactModel]):
    """CRUD operations for ArtifactModel keyed by "{session_id}-{type}"."""

    def __init__(self) -> None:
        """Initialize ArtifactCRUD with ArtifactModel."""
        super().__init__(ArtifactModel)

    async def upsert(
        self,
        session: AsyncSession,
        session_id: UUID,
        artifact_type: ArtifactType,
        title: str,
        content_md: str,
    ) -> ArtifactModel:
        """
        Write the single artifact of a type for a session, overwriting any earlier version.

        Args:
            session: Async database session
            session_id: Owning session
            artifact_type: PRD or TECH_SPEC
            title: Display title
            content_md: Markdown body

        Returns:
            ArtifactModel as stored
        """
        return await super().upsert(
            session,
            ("id",),
            id=artifact_id(str(session_id), artifact_type),
            session_id=session_id,
            type=artifact_type,
            title=title,
            content_md=content_md,
        )

    async def get_for_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        artifact_type: ArtifactType,
    ) -> ArtifactModel | None:
        return await self.get_by_id(session, artifact_id(str(session_id), artifact_type))

    async def list_for_session(self, session: AsyncSession, session_id: UUID) -> Sequence[ArtifactModel]:
        stmt = select(ArtifactModel).where(ArtifactModel.session_id == session_id)
        result = await session.execute(stmt)
        return result.scalars().all()


artifact_crud = ArtifactCRUD()
