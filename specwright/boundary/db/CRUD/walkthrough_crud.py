"""
Tech walkthrough CRUD operations.

Covers the walkthrough header plus its driver answers, decisions and
agentic profile. Driver answers and the profile are upserts; decisions
are replaced as a whole collection.

Dependencies: sqlalchemy, specwright.boundary.db.models
System role: Architecture walkthrough persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from specwright.boundary.db.models import (
    AgenticProfileModel,
    ArchitectureDecisionModel,
    ArchitectureDriverAnswerModel,
    TechWalkthroughModel,
)
from specwright.boundary.db.CRUD.base_crud import BaseCRUD, upsert_row
from specwright.core.pipeline.workflow import DecisionStatus, WalkthroughStatus

DECISION_FIELDS = (
    "title",
    "area",
    "chosen_option",
    "alternatives",
    "tradeoffs",
    "user_visible_consequence",
    "mvp_impact",
    "open_questions",
    "status",
)


class WalkthroughCRUD(BaseCRUD[TechWalkthroughModel]):
    """CRUD operations for TechWalkthroughModel and its children."""

    def __init__(self) -> None:
        """Initialize WalkthroughCRUD with TechWalkthroughModel."""
        super().__init__(TechWalkthroughModel)

    async def get_or_create_for_session(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> TechWalkthroughModel:
        """
        Create the session's walkthrough in_progress, or return the existing one unchanged.

        Only updated_at is touched on conflict, so a completed walkthrough
        stays completed.
        """
        return await upsert_row(
            session,
            TechWalkthroughModel,
            ("session_id",),
            {"session_id": session_id},
        )

    async def get_with_children(
        self,
        session: AsyncSession,
        *,
        id: UUID | None = None,
        session_id: UUID | None = None,
    ) -> TechWalkthroughModel | None:
        """
        Retrieve a walkthrough by its id or its session id, children loaded.

        Args:
            session: Async database session
            id: Walkthrough UUID
            session_id: Owning session UUID

        Returns:
            TechWalkthroughModel with drivers, decisions and profile loaded
        """
        stmt = select(TechWalkthroughModel).options(
            selectinload(TechWalkthroughModel.drivers),
            selectinload(TechWalkthroughModel.decisions),
            selectinload(TechWalkthroughModel.agentic_profile),
        )
        if id is not None:
            stmt = stmt.where(TechWalkthroughModel.id == id)
        elif session_id is not None:
            stmt = stmt.where(TechWalkthroughModel.session_id == session_id)
        else:
            raise ValueError("id or session_id is required")
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def set_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: WalkthroughStatus,
    ) -> TechWalkthroughModel | None:
        return await self.update_by_id(session, id, status=status)

    # -- drivers ---------------------------------------------------------

    async def upsert_driver_answer(
        self,
        session: AsyncSession,
        walkthrough_id: UUID,
        question_key: str,
        answer: str,
    ) -> ArchitectureDriverAnswerModel:
        return await upsert_row(
            session,
            ArchitectureDriverAnswerModel,
            ("walkthrough_id", "question_key"),
            {"walkthrough_id": walkthrough_id, "question_key": question_key, "answer": answer},
        )

    async def list_driver_answers(
        self,
        session: AsyncSession,
        walkthrough_id: UUID,
    ) -> Sequence[ArchitectureDriverAnswerModel]:
        stmt = select(ArchitectureDriverAnswerModel).where(
            ArchitectureDriverAnswerModel.walkthrough_id == walkthrough_id
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    # -- decisions -------------------------------------------------------

    async def replace_decisions(
        self,
        session: AsyncSession,
        walkthrough_id: UUID,
        decisions: Sequence[dict[str, Any]],
    ) -> list[ArchitectureDecisionModel]:
        """
        Delete every decision of the walkthrough, then insert the new ones in order.

        sort_order is the index in ``decisions``. Status defaults to
        tentative when an item does not carry one.

        Args:
            session: Async database session
            walkthrough_id: Owning walkthrough
            decisions: Decision field dicts (see DECISION_FIELDS)

        Returns:
            The inserted rows in sort order
        """
        await session.execute(
            delete(ArchitectureDecisionModel).where(
                ArchitectureDecisionModel.walkthrough_id == walkthrough_id
            )
        )
        rows = [
            ArchitectureDecisionModel(
                walkthrough_id=walkthrough_id,
                sort_order=index,
                **{"status": DecisionStatus.TENTATIVE, **{k: v for k, v in item.items() if k in DECISION_FIELDS}},
            )
            for index, item in enumerate(decisions)
        ]
        session.add_all(rows)
        await session.flush()
        return rows

    async def list_decisions(
        self,
        session: AsyncSession,
        walkthrough_id: UUID,
    ) -> Sequence[ArchitectureDecisionModel]:
        stmt = (
            select(ArchitectureDecisionModel)
            .where(ArchitectureDecisionModel.walkthrough_id == walkthrough_id)
            .order_by(ArchitectureDecisionModel.sort_order)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_decision(
        self,
        session: AsyncSession,
        decision_id: UUID,
        **fields,
    ) -> ArchitectureDecisionModel | None:
        """Edit one decision in place; unknown fields are ignored."""
        values = {k: v for k, v in fields.items() if k in DECISION_FIELDS}
        if not values:
            return await session.get(ArchitectureDecisionModel, decision_id)
        return await _decision_crud.update_by_id(session, decision_id, **values)

    # -- agentic profile -------------------------------------------------

    async def upsert_agentic_profile(
        self,
        session: AsyncSession,
        walkthrough_id: UUID,
        **fields,
    ) -> AgenticProfileModel:
        return await upsert_row(
            session,
            AgenticProfileModel,
            ("walkthrough_id",),
            {"walkthrough_id": walkthrough_id, **fields},
        )


_decision_crud = BaseCRUD(ArchitectureDecisionModel)
walkthrough_crud = WalkthroughCRUD()
