"""
Session API endpoints.

Routes:
- POST /sessions - Create new session
- GET /sessions/{id} - Get session with sections, summaries and artifacts
- PATCH /sessions/{id} - Update session metadata
- GET /sessions/{id}/progress - Derived workflow position
- PATCH /sessions/{id}/sections - Save one section's answers

Dependencies: specwright.application.services, specwright.models
System role: Session management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from specwright.api.deps import get_section_service, get_session_service
from specwright.application.services import SectionService, SessionService
from specwright.boundary.db.models import SessionModel
from specwright.models.common import SavedResponse, SuccessResponse
from specwright.models.section import SaveSectionRequest
from specwright.models.session import (
    CreateSessionRequest,
    ProgressResponse,
    SectionAnswerResponse,
    SectionSummaryResponse,
    SessionCreatedResponse,
    SessionDetailResponse,
    StoredArtifactResponse,
    UpdateSessionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def to_session_detail(session: SessionModel) -> SessionDetailResponse:
    return SessionDetailResponse(
        id=session.id,
        title=session.title,
        product_description=session.product_description,
        project_scope=session.project_scope,
        active_key=session.active_key,
        expires_at=session.expires_at,
        created_at=session.created_at,
        updated_at=session.updated_at,
        sections=[SectionAnswerResponse.model_validate(row) for row in session.answers],
        summaries=[SectionSummaryResponse.model_validate(row) for row in session.summaries],
        artifacts=[StoredArtifactResponse.model_validate(row) for row in session.artifacts],
    )


@router.post("", response_model=SuccessResponse[SessionCreatedResponse], status_code=201)
async def create_session(
    request: CreateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SuccessResponse[SessionCreatedResponse]:
    """
    Create new session with optional metadata.

    Args:
        request: CreateSessionRequest with title, description and scope
        session_service: Injected SessionService

    Returns:
        SessionCreatedResponse: New session id, expiry and active section
    """
    session = await session_service.create_session(
        title=request.title,
        product_description=request.product_description,
        project_scope=request.project_scope,
    )
    return SuccessResponse(
        data=SessionCreatedResponse(
            session_id=session.id,
            expires_at=session.expires_at,
            active_key=session.active_key,
        )
    )


@router.get("/{session_id}", response_model=SuccessResponse[SessionDetailResponse])
async def get_session(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> SuccessResponse[SessionDetailResponse]:
    """
    Get session with everything it owns.

    Raises:
        SessionNotFoundError: 404 NOT_FOUND
        SessionExpiredError: 410 SESSION_EXPIRED
    """
    session = await session_service.get_session(session_id)
    return SuccessResponse(data=to_session_detail(session))


@router.patch("/{session_id}", response_model=SuccessResponse[SessionDetailResponse])
async def update_session(
    session_id: UUID,
    request: UpdateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SuccessResponse[SessionDetailResponse]:
    """Update title, description, scope or active section."""
    session = await session_service.update_session(
        session_id,
        title=request.title,
        product_description=request.product_description,
        project_scope=request.project_scope,
        active_key=request.active_key.value if request.active_key else None,
    )
    return SuccessResponse(data=to_session_detail(session))


@router.get("/{session_id}/progress", response_model=SuccessResponse[ProgressResponse])
async def get_progress(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> SuccessResponse[ProgressResponse]:
    progress = await session_service.get_progress(session_id)
    return SuccessResponse(data=ProgressResponse(**progress))


@router.patch("/{session_id}/sections", response_model=SuccessResponse[SavedResponse])
async def save_section(
    session_id: UUID,
    request: SaveSectionRequest,
    section_service: SectionService = Depends(get_section_service),
) -> SuccessResponse[SavedResponse]:
    """
    Save one section's answers, replacing what was stored for it.

    Raises:
        SessionNotFoundError: 404 NOT_FOUND
        SessionExpiredError: 410 SESSION_EXPIRED
    """
    await section_service.save_section(
        session_id,
        request.key,
        [item.model_dump() for item in request.qa],
        request.notes,
    )
    return SuccessResponse(data=SavedResponse())
