"""
Session CRUD operations.

Provides Create, Read, Update operations for SessionModel
with eager loading of everything a session owns.

Dependencies: sqlalchemy, specwright.boundary.db.models
System role: Session persistence operations
"""

from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from specwright.boundary.db.base import utcnow
from specwright.boundary.db.models import SessionModel, TechWalkthroughModel
from specwright.boundary.db.CRUD.base_crud import BaseCRUD


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with TTL-aware creation and nested eager loading.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def create_with_ttl(
        self,
        session: AsyncSession,
        ttl_days: int,
        **fields,
    ) -> SessionModel:
        """
        Create a session expiring ``ttl_days`` from now.

        Args:
            session: Async database session
            ttl_days: Days until expiry
            **fields: title, product_description, project_scope, ...

        Returns:
            Created SessionModel
        """
        return await self.create(session, expires_at=utcnow() + timedelta(days=ttl_days), **fields)

    async def get_with_children(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> SessionModel | None:
        """
        Retrieve a session with answers, summaries, artifacts and walkthrough loaded.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            SessionModel with children loaded, None if not found
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.id == id)
            .options(
                selectinload(SessionModel.answers),
                selectinload(SessionModel.summaries),
                selectinload(SessionModel.artifacts),
                selectinload(SessionModel.walkthrough).selectinload(TechWalkthroughModel.decisions),
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def extend_expiry(
        self,
        session: AsyncSession,
        id: UUID,
        expires_at: datetime,
    ) -> SessionModel | None:
        """Push a session's expiry out, used when reopening an expired session."""
        return await self.update_by_id(session, id, expires_at=expires_at)


session_crud = SessionCRUD()
