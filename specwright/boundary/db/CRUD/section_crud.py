"""
Section CRUD operations.

Answers and summaries are upserted on (session_id, key); a write to one
section never touches another.

Dependencies: sqlalchemy, specwright.boundary.db.models
System role: Section answer and summary persistence
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from specwright.boundary.db.models import SectionAnswerModel, SectionSummaryModel
from specwright.boundary.db.CRUD.base_crud import BaseCRUD, upsert_row


class SectionCRUD(BaseCRUD[SectionAnswerModel]):
    """CRUD operations for section answers, with summary helpers."""

    def __init__(self) -> None:
        """Initialize SectionCRUD with SectionAnswerModel."""
        super().__init__(SectionAnswerModel)

    async def upsert_answer(
        self,
        session: AsyncSession,
        session_id: UUID,
        key: str,
        qa: list[dict[str, Any]],
        notes: str | None = None,
    ) -> SectionAnswerModel:
        """
        Create or replace the answers for one section.

        Args:
            session: Async database session
            session_id: Owning session
            key: Section key
            qa: Ordered question/answer dicts
            notes: Optional free-text notes

        Returns:
            SectionAnswerModel as stored
        """
        return await upsert_row(
            session,
            SectionAnswerModel,
            ("session_id", "key"),
            {"session_id": session_id, "key": key, "qa": qa, "notes": notes},
        )

    async def upsert_summary(
        self,
        session: AsyncSession,
        session_id: UUID,
        key: str,
        summary: str,
    ) -> SectionSummaryModel:
        """Create or replace the summary for one section."""
        return await upsert_row(
            session,
            SectionSummaryModel,
            ("session_id", "key"),
            {"session_id": session_id, "key": key, "summary": summary},
        )

    async def get_answer(
        self,
        session: AsyncSession,
        session_id: UUID,
        key: str,
    ) -> SectionAnswerModel | None:
        stmt = select(SectionAnswerModel).where(
            SectionAnswerModel.session_id == session_id,
            SectionAnswerModel.key == key,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_answers(self, session: AsyncSession, session_id: UUID) -> Sequence[SectionAnswerModel]:
        stmt = select(SectionAnswerModel).where(SectionAnswerModel.session_id == session_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_summaries(self, session: AsyncSession, session_id: UUID) -> Sequence[SectionSummaryModel]:
        stmt = select(SectionSummaryModel).where(SectionSummaryModel.session_id == session_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def summaries_by_key(self, session: AsyncSession, session_id: UUID) -> dict[str, str]:
        """Summaries as a {key: summary} map."""
        return {row.key: row.summary for row in await self.list_summaries(session, session_id)}


section_crud = SectionCRUD()
