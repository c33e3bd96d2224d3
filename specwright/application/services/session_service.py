"""
Session service orchestrator.

Coordinates session lifecycle operations: creation with a TTL, fetch with
everything the session owns, metadata edits and derived progress.

Dependencies: specwright.boundary.db.CRUD, specwright.core.pipeline
System role: Session use case orchestration
"""

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from specwright.boundary.db.base import as_utc, utcnow
from specwright.boundary.db.CRUD.session_crud import session_crud
from specwright.boundary.db.models import SessionModel
from specwright.configs import get_settings
from specwright.core.content import SECTION_ORDER, ProjectScope
from specwright.core.exceptions import SessionExpiredError, SessionNotFoundError
from specwright.core.pipeline import (
    completed_sections,
    derive_main_flow_state,
    unlocked_stages,
)

logger = logging.getLogger(__name__)


def is_expired(session: SessionModel) -> bool:
    return as_utc(session.expires_at) < utcnow()


async def load_session(
    db: AsyncSession,
    session_id: UUID,
    *,
    check_expiry: bool = False,
    with_children: bool = False,
) -> SessionModel:
    """
    Load a session or raise.

    Args:
        db: Async database session
        session_id: Session UUID
        check_expiry: Raise SessionExpiredError for expired sessions
        with_children: Eagerly load answers, summaries, artifacts and walkthrough

    Returns:
        SessionModel

    Raises:
        SessionNotFoundError: If no session has this id
        SessionExpiredError: If check_expiry is set and the session has expired
    """
    if with_children:
        session = await session_crud.get_with_children(db, session_id)
    else:
        session = await session_crud.get_by_id(db, session_id)
    if session is None:
        raise SessionNotFoundError(str(session_id))
    if check_expiry and is_expired(session):
        raise SessionExpiredError(str(session_id))
    return session


class SessionService:
    """Session service orchestrator."""

    def __init__(self, db: AsyncSession, ttl_days: int | None = None) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
            ttl_days: Session lifetime in days (defaults to settings)
        """
        self.db = db
        self.ttl_days = ttl_days if ttl_days is not None else get_settings().session_ttl_days

    async def create_session(
        self,
        title: str | None = None,
        product_description: str | None = None,
        project_scope: ProjectScope | None = None,
    ) -> SessionModel:
        """
        Create new session expiring after the configured TTL.

        Returns:
            SessionModel: Created session
        """
        session = await session_crud.create_with_ttl(
            self.db,
            self.ttl_days,
            title=title,
            product_description=product_description,
            project_scope=project_scope,
        )
        await self.db.commit()
        logger.info("Session created", extra={"session_id": str(session.id)})
        return session

    async def get_session(self, session_id: UUID) -> SessionModel:
        """
        Get a live session with its sections, summaries and artifacts.

        Raises:
            SessionNotFoundError: If session not found
            SessionExpiredError: If the session has expired
        """
        return await load_session(self.db, session_id, check_expiry=True, with_children=True)

    async def update_session(self, session_id: UUID, **fields: Any) -> SessionModel:
        """
        Update session metadata. Fields passed as None are left unchanged.

        Raises:
            SessionNotFoundError: If session not found
        """
        await load_session(self.db, session_id)
        values = {key: value for key, value in fields.items() if value is not None}
        if values:
            await session_crud.update_by_id(self.db, session_id, **values)
            await self.db.commit()
        return await load_session(self.db, session_id, with_children=True)

    async def restore_or_extend(self, session_id: UUID) -> SessionModel:
        """
        Make sure a session exists and is live.

        A client can hold on to the id of a session that no longer exists
        (for example after the database was recreated). Such a session is
        recreated as "Restored Session"; an expired one gets a fresh TTL.
        """
        expires_at = utcnow() + timedelta(days=self.ttl_days)
        session = await session_crud.get_by_id(self.db, session_id)
        if session is None:
            session = await session_crud.create(
                self.db, id=session_id, title="Restored Session", expires_at=expires_at
            )
            await self.db.commit()
            logger.info("Session restored", extra={"event": "session.restored", "session_id": str(session_id)})
        elif is_expired(session):
            session = await session_crud.extend_expiry(self.db, session_id, expires_at)
            await self.db.commit()
            logger.info("Session extended", extra={"event": "session.extended", "session_id": str(session_id)})
        return session

    async def get_progress(self, session_id: UUID) -> dict[str, Any]:
        """
        Derive the workflow position of a session from its stored records.

        Raises:
            SessionNotFoundError: If session not found
        """
        session = await load_session(self.db, session_id, with_children=True)
        answered = [row.key for row in session.answers]
        summarized = [row.key for row in session.summaries]
        artifact_types = [row.type.value for row in session.artifacts]
        state = derive_main_flow_state(answered, summarized, artifact_types)
        return {
            "session_id": session.id,
            "state": state,
            "completed_sections": completed_sections(summarized),
            "total_sections": len(SECTION_ORDER),
            "artifacts": sorted(artifact_types),
            "unlocked_stages": unlocked_stages(state),
            "has_walkthrough": session.walkthrough is not None,
        }
